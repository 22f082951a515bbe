# src/clinicexport/models/subject_record.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

from clinicexport.models.demographic_record import DemographicRecord
from clinicexport.models.statement_record import StatementRecord


@dataclass
class SubjectRecord:
    """
    患者1人分の処理結果。バッチオーケストレータのテーブルが所有する。

    processed は「パースまで完了した」ことを表し、検証エラーの有無とは別。
    errors / warnings は発見順のまま保持する（ソートしない）。
    """
    subject_id: str
    demographic: DemographicRecord = field(default_factory=DemographicRecord)
    statement: StatementRecord = field(default_factory=StatementRecord)
    processed: bool = False
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def is_successful(self) -> bool:
        return not self.errors
