# src/clinicexport/parser/stmt_parser.py

from __future__ import annotations
from typing import List, Optional
import logging
import re

from clinicexport.errors import FieldNotFoundError
from clinicexport.logic.dates import format_display_date, parse_us_date
from clinicexport.models.statement_record import StatementRecord

logger = logging.getLogger(__name__)

RECEIVED_DATE_PATTERN = re.compile(
    r"Received Date\s*:?\s*(\d{1,2}/\d{1,2}/\d{4})", re.IGNORECASE
)
AMOUNT_DUE_PATTERN = re.compile(r"Amount Due\s*:?\s*\$\s*([\d,]+\.\d{2})", re.IGNORECASE)
ANY_DATE_PATTERN = re.compile(r"(?<!\d)(\d{1,2}/\d{1,2}/\d{4})(?!\d)")
CPT_CODE_PATTERN = re.compile(r"CPT\s*:?\s*(\d{5})(?!\d)", re.IGNORECASE)


def _detect_last_payment_date(text: str) -> str:
    """
    "Received Date" の日付を全部集め、一番新しいものを MM/DD/YYYY で返す。
    1件も無ければ空文字列。暦として不正な日付は読み飛ばす。
    """
    dates = []
    for m in RECEIVED_DATE_PATTERN.finditer(text):
        d = parse_us_date(m.group(1))
        if d is None:
            logger.debug("Skipping invalid received date %s", m.group(1))
            continue
        dates.append(d)

    if not dates:
        return ""
    return format_display_date(max(dates))


def _detect_amount_due(text: str) -> str:
    m = AMOUNT_DUE_PATTERN.search(text)
    if not m:
        raise FieldNotFoundError("amount_due", "Amount due not found in STMT document")
    # 桁区切りのカンマはすべて除去
    return m.group(1).replace(",", "")


def _detect_visit_dates(text: str) -> List[str]:
    # 本文中の日付をすべて（出現順・重複あり）
    return [m.group(1) for m in ANY_DATE_PATTERN.finditer(text)]


def _detect_service_codes(text: str) -> List[str]:
    return [m.group(1) for m in CPT_CODE_PATTERN.finditer(text)]


def parse_stmt_text(text: Optional[str]) -> StatementRecord:
    """
    STMT ドキュメントのテキストから請求情報を抽出する。

    必須は請求額 (Amount Due) のみ。他の項目は見つからなければ空になる。
    """
    text = text or ""
    amount_due = _detect_amount_due(text)
    record = StatementRecord(
        last_payment_date=_detect_last_payment_date(text),
        amount_due=amount_due,
        visit_dates=_detect_visit_dates(text),
        service_codes=_detect_service_codes(text),
    )
    logger.debug(
        "Parsed STMT: amount=%s, %d visit dates, %d CPT codes",
        record.amount_due, len(record.visit_dates), len(record.service_codes),
    )
    return record
