# src/clinicexport/errors.py
"""
clinicexport で使う例外と、バッチ単位のエラー収集器。

どの例外もバッチ全体を止めることはない。オーケストレータが患者単位の
記録（SubjectRecord.errors）に変換する。
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import threading


class ClinicExportError(Exception):
    """clinicexport 固有の例外の基底クラス。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class InputFormatError(ClinicExportError):
    """ファイル名から患者 ID または種別を判定できない。"""

    def __init__(self, path: Path | str, reason: str) -> None:
        name = Path(path).name
        super().__init__(f"{reason}: {name}", {"path": str(path)})
        self.path = Path(path)


class MissingPairError(ClinicExportError):
    """DEMOS / STMT のどちらかが揃っていない。"""

    def __init__(self, subject_id: str, missing: List[str]) -> None:
        super().__init__(
            f"Subject {subject_id} is missing: {', '.join(missing)}",
            {"subject_id": subject_id, "missing": list(missing)},
        )
        self.subject_id = subject_id
        self.missing = list(missing)


class FieldNotFoundError(ClinicExportError):
    """必須フィールドのパターンが一致しなかった。"""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(message, {"field": field_name})
        self.field_name = field_name


class TextExtractionError(ClinicExportError):
    """ドキュメントからテキストを取り出せなかった。"""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(
            f"Failed to extract text from {Path(path).name}: {reason}",
            {"path": str(path)},
        )
        self.path = Path(path)


class BatchBusyError(ClinicExportError):
    """バッチ実行中に submit が再度呼ばれた。"""


@dataclass
class CollectedError:
    generation: int
    subject_id: str
    message: str


@dataclass
class ErrorCollector:
    """
    バッチ中の失敗メッセージを集める収集器。

    プロセス全体で共有するリストではなく、呼び出し側がスコープを決めて
    オーケストレータに渡す。
    """
    entries: List[CollectedError] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, generation: int, subject_id: str, message: str) -> None:
        with self._lock:
            self.entries.append(CollectedError(generation, subject_id, message))

    def for_subject(self, subject_id: str) -> List[str]:
        with self._lock:
            return [e.message for e in self.entries if e.subject_id == subject_id]

    def clear(self) -> None:
        with self._lock:
            self.entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self.entries)
