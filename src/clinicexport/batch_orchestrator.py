# src/clinicexport/batch_orchestrator.py
"""
バッチ処理の司令塔。

- 入力パス → DEMOS/STMT の組 → テキスト抽出 → パース → 検証 → 患者テーブル
- 患者テーブルと進捗カウンタはここだけが更新する
- 患者ごとの処理はスレッドプールで並列に走らせ、結果の反映は submit を
  呼んだスレッドが入力順に1件ずつ行う（書き込みは1か所）
- clear() / submit() のたびに世代番号を進め、古い世代の結果は捨てる

デスクトップ側へは Qt シグナルで通知する。
"""

from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import date
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple
import logging
import threading

from PySide6.QtCore import QObject, Signal

from clinicexport.config import AppConfig, ExportSettings
from clinicexport.errors import (
    BatchBusyError,
    ClinicExportError,
    ErrorCollector,
    MissingPairError,
)
from clinicexport.logic.export_table import build_export_table
from clinicexport.logic.validation import validate_subject
from clinicexport.models.demographic_record import DemographicRecord
from clinicexport.models.document_pair import DocumentPair
from clinicexport.models.statement_record import StatementRecord
from clinicexport.models.subject_record import SubjectRecord
from clinicexport.parser.demos_parser import parse_demos_text
from clinicexport.parser.pair_resolver import UNPARSABLE_SUBJECT_ID, resolve_pairs
from clinicexport.parser.stmt_parser import parse_stmt_text
from clinicexport.text_extractor import TextExtractor, extract_text

logger = logging.getLogger(__name__)

# 1患者あたりの想定ドキュメント数（DEMOS + STMT）
DOCUMENTS_PER_SUBJECT = 2

MISSING_DEMOGRAPHIC_MESSAGE = "Missing demographic document (DEMOS)"
MISSING_STATEMENT_MESSAGE = "Missing statement document (STMT)"


def _failed_record(subject_id: str, errors: List[str]) -> SubjectRecord:
    return SubjectRecord(
        subject_id=subject_id,
        demographic=DemographicRecord.empty(),
        statement=StatementRecord.empty(),
        processed=False,
        errors=list(errors),
    )


def _apply_validation(record: SubjectRecord, today: date) -> SubjectRecord:
    result = validate_subject(record, today)
    record.errors = list(result.errors)
    record.warnings = list(result.warnings)
    return record


def process_pair(pair: DocumentPair, extractor: TextExtractor, today: date) -> SubjectRecord:
    """
    揃っている1組を処理する（ワーカースレッドで実行）。

    抽出・パースの失敗は processed=False と、その失敗メッセージ1件の
    レコードに変換して返す。例外は外に出さない。
    """
    subject_id = pair.subject_id
    try:
        demos_text = extractor(pair.demographic)
        stmt_text = extractor(pair.statement)
        demographic = parse_demos_text(demos_text)
        statement = parse_stmt_text(stmt_text)
    except ClinicExportError as e:
        logger.info("Subject %s failed: %s", subject_id, e)
        return _failed_record(subject_id, [str(e)])
    except Exception as e:
        logger.exception("Unexpected failure while processing subject %s", subject_id)
        return _failed_record(subject_id, [f"Unexpected error: {e}"])

    record = SubjectRecord(
        subject_id=subject_id,
        demographic=demographic,
        statement=statement,
        processed=True,
    )
    return _apply_validation(record, today)


def missing_pair_record(pair: DocumentPair) -> SubjectRecord:
    missing: List[str] = []
    if pair.demographic is None:
        missing.append(MISSING_DEMOGRAPHIC_MESSAGE)
    if pair.statement is None:
        missing.append(MISSING_STATEMENT_MESSAGE)
    error = MissingPairError(pair.subject_id, missing)
    logger.info("%s", error)
    return _failed_record(pair.subject_id, error.missing)


class BatchOrchestrator(QObject):
    """
    患者テーブル・進捗カウンタを持ち、バッチ処理を進める。

    submit は再入不可。実行中に呼ぶと BatchBusyError。
    """

    batchStarted = Signal()
    progressChanged = Signal(int, int)   # (current_progress, total_files)
    subjectUpdated = Signal(str)         # subject_id
    subjectRemoved = Signal(str)
    batchFinished = Signal()

    def __init__(
        self,
        extractor: Optional[TextExtractor] = None,
        config: Optional[AppConfig] = None,
        collector: Optional[ErrorCollector] = None,
        clock: Callable[[], date] = date.today,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._extractor: TextExtractor = extractor or extract_text
        self._config = config or AppConfig()
        self._collector = collector if collector is not None else ErrorCollector()
        self._clock = clock

        self._lock = threading.RLock()
        # dict は挿入順を保持する。再投入で上書きしても位置は変わらない
        self._subjects: Dict[str, SubjectRecord] = {}
        self._current_progress = 0
        self._total_files = 0
        self._running = False
        self._generation = 0

    # ─────────────────────────────
    # 状態の参照
    # ─────────────────────────────
    @property
    def is_processing(self) -> bool:
        with self._lock:
            return self._running

    @property
    def current_progress(self) -> int:
        with self._lock:
            return self._current_progress

    @property
    def total_files(self) -> int:
        with self._lock:
            return self._total_files

    @property
    def subjects(self) -> List[SubjectRecord]:
        with self._lock:
            return list(self._subjects.values())

    @property
    def processed_subjects(self) -> List[SubjectRecord]:
        return [s for s in self.subjects if s.processed]

    @property
    def subjects_with_errors(self) -> List[SubjectRecord]:
        return [s for s in self.subjects if s.errors]

    def get_subject(self, subject_id: str) -> Optional[SubjectRecord]:
        with self._lock:
            return self._subjects.get(subject_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subjects)

    # ─────────────────────────────
    # バッチ実行
    # ─────────────────────────────
    def submit(self, paths: Iterable[Path | str]) -> List[SubjectRecord]:
        """
        入力パス一式を処理し、この実行で確定したレコードを返す。

        途中で clear() された場合、それ以降に終わった結果は捨てられる。
        """
        path_list = [Path(p) for p in paths]

        with self._lock:
            if self._running:
                raise BatchBusyError("A batch is already running")
            self._running = True
            self._generation += 1
            generation = self._generation
            self._current_progress = 0
            self._total_files = len(path_list)
            # 前回の unparsable バケットは今回の入力とは無関係なので捨てる
            self._subjects.pop(UNPARSABLE_SUBJECT_ID, None)

        logger.info("Batch %d started with %d files", generation, len(path_list))
        self.batchStarted.emit()
        self.progressChanged.emit(0, len(path_list))

        accepted: List[SubjectRecord] = []
        try:
            pipeline = self._config.pipeline
            resolution = resolve_pairs(
                path_list,
                demographic_keyword=pipeline.demographic_keyword,
                statement_keyword=pipeline.statement_keyword,
            )

            unparsable = resolution.unparsable
            if unparsable is not None:
                record = _failed_record(UNPARSABLE_SUBJECT_ID, unparsable.errors)
                # unparsable は処理対象の患者ではないので進捗に数えない
                if self._commit(generation, record, progress_step=0):
                    accepted.append(record)

            today = self._clock()
            with ThreadPoolExecutor(
                max_workers=pipeline.max_workers,
                thread_name_prefix="clinicexport",
            ) as pool:
                jobs: List[Tuple[DocumentPair, Optional[Future]]] = []
                for pair in resolution.pairs.values():
                    if pair.is_complete:
                        jobs.append((pair, pool.submit(process_pair, pair, self._extractor, today)))
                    else:
                        jobs.append((pair, None))

                # 入力順に反映する
                for pair, future in jobs:
                    if future is None:
                        record = missing_pair_record(pair)
                    else:
                        record = future.result()
                    if self._commit(generation, record, progress_step=DOCUMENTS_PER_SUBJECT):
                        accepted.append(record)
        finally:
            with self._lock:
                self._running = False
            logger.info(
                "Batch %d finished: %d subjects, %d with errors",
                generation, len(accepted), sum(1 for r in accepted if r.errors),
            )
            self.batchFinished.emit()

        return accepted

    def _commit(self, generation: int, record: SubjectRecord, progress_step: int) -> bool:
        with self._lock:
            if generation != self._generation:
                logger.warning(
                    "Dropping stale result for subject %s (batch %d, current %d)",
                    record.subject_id, generation, self._generation,
                )
                return False
            self._subjects[record.subject_id] = record
            self._current_progress += progress_step
            current, total = self._current_progress, self._total_files

        for message in record.errors:
            self._collector.record(generation, record.subject_id, message)

        self.subjectUpdated.emit(record.subject_id)
        self.progressChanged.emit(current, total)
        return True

    # ─────────────────────────────
    # テーブル操作
    # ─────────────────────────────
    def clear(self) -> None:
        """
        テーブルと進捗をリセットする。実行中の処理は止めないが、
        その結果はテーブルに反映されなくなる。
        """
        with self._lock:
            self._subjects.clear()
            self._current_progress = 0
            self._total_files = 0
            self._generation += 1
        self._collector.clear()
        logger.info("Subject table cleared")
        self.progressChanged.emit(0, 0)

    def remove_subject(self, subject_id: str) -> bool:
        with self._lock:
            removed = self._subjects.pop(subject_id, None)
        if removed is None:
            return False
        self.subjectRemoved.emit(subject_id)
        return True

    def update_subject(
        self,
        subject_id: str,
        demographic: Optional[DemographicRecord] = None,
        statement: Optional[StatementRecord] = None,
    ) -> SubjectRecord:
        """
        ユーザー編集を反映して再検証する。パース済みの患者のみ対象。
        """
        with self._lock:
            current = self._subjects.get(subject_id)
            if current is None:
                raise KeyError(subject_id)
            if not current.processed:
                raise ClinicExportError(
                    f"Subject {subject_id} has not been processed and cannot be edited",
                    {"subject_id": subject_id},
                )
            record = SubjectRecord(
                subject_id=subject_id,
                demographic=demographic or current.demographic,
                statement=statement or current.statement,
                processed=True,
            )
            _apply_validation(record, self._clock())
            self._subjects[subject_id] = record

        self.subjectUpdated.emit(subject_id)
        return record

    # ─────────────────────────────
    # 出力
    # ─────────────────────────────
    def export_table(
        self,
        settings: Optional[ExportSettings] = None,
        today: Optional[date] = None,
    ) -> List[List[str]]:
        return build_export_table(
            self.subjects,
            settings or self._config.export,
            today or self._clock(),
        )
