# src/clinicexport/logic/export_table.py

from __future__ import annotations
from datetime import date
from typing import Iterable, List, Optional

from clinicexport.config import ExportSettings
from clinicexport.logic.record_transformer import get_column_headers, transform_subject
from clinicexport.models.export_row import MINOR_COLUMN_HEADER
from clinicexport.models.subject_record import SubjectRecord
from clinicexport.parser.pair_resolver import UNPARSABLE_SUBJECT_ID


def column_headers(settings: ExportSettings) -> List[str]:
    headers = get_column_headers()
    if settings.flag_minors:
        headers.append(MINOR_COLUMN_HEADER)
    return headers


def build_export_table(
    records: Iterable[SubjectRecord],
    settings: Optional[ExportSettings] = None,
    today: Optional[date] = None,
) -> List[List[str]]:
    """
    出力設定を適用して、スプレッドシート書き込み側に渡す行の一覧を作る。

    - unparsable バケットは常に除外
    - only_successful: エラーが1件でもある患者は除外
    - include_headers: 先頭に見出し行
    - flag_minors: 末尾に未成年フラグ列 ("Y"/"N")
    """
    settings = settings or ExportSettings()
    rows: List[List[str]] = []

    if settings.include_headers:
        rows.append(column_headers(settings))

    for record in records:
        # unparsable バケットは患者ではないので行にしない
        if record.subject_id == UNPARSABLE_SUBJECT_ID:
            continue
        if settings.only_successful and not record.is_successful:
            continue
        row = transform_subject(record, today)
        cells = row.to_array()
        if settings.flag_minors:
            cells.append("Y" if row.is_minor else "N")
        rows.append(cells)

    return rows
