# src/clinicexport/models/document_pair.py

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class DocumentRole(Enum):
    """ドキュメント種別。ファイル名のキーワードで決まる。"""
    DEMOGRAPHIC = "DEMOS"
    STATEMENT = "STMT"


@dataclass
class DocumentPair:
    """
    1患者分のドキュメント組（DEMOS + STMT）。

    - errors: ファイル名の解釈に失敗したパスのメッセージ（unparsable バケット用）
    - overwritten: 同じ ID・同じ種別で後勝ちにより置き換えられたパス
    """
    subject_id: str
    demographic: Optional[Path] = None
    statement: Optional[Path] = None
    errors: List[str] = field(default_factory=list)
    overwritten: List[Path] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.demographic is not None and self.statement is not None

    def get(self, role: DocumentRole) -> Optional[Path]:
        if role is DocumentRole.DEMOGRAPHIC:
            return self.demographic
        return self.statement

    def set(self, role: DocumentRole, path: Path) -> None:
        previous = self.get(role)
        if previous is not None:
            self.overwritten.append(previous)
        if role is DocumentRole.DEMOGRAPHIC:
            self.demographic = path
        else:
            self.statement = path
