# src/clinicexport/parser/demos_parser.py

from __future__ import annotations
from typing import Optional
import logging
import re

from clinicexport.errors import FieldNotFoundError
from clinicexport.models.demographic_record import Address, DemographicRecord

logger = logging.getLogger(__name__)

ACCOUNT_NUMBER_PATTERN = re.compile(r"Account Number\s*:\s*(\d+)", re.IGNORECASE)
# テキスト先頭の「氏名 - Patient Demographics」。氏名は大文字と句読点のみ
PATIENT_NAME_PATTERN = re.compile(
    r"^\s*([A-Z][A-Z\s.,]*?)\s+-\s+(?i:Patient Demographics)"
)
DATE_OF_BIRTH_PATTERN = re.compile(
    r"Date of Birth\s*:\s*(\d{1,2}/\d{1,2}/\d{4})", re.IGNORECASE
)
MOBILE_PHONE_PATTERN = re.compile(
    r"(?:Cell|Mobile) Phone Number\s*:\s*(\(?\d[\d\-(). ]*)", re.IGNORECASE
)
HOME_PHONE_PATTERN = re.compile(
    r"Home Phone Number\s*:\s*(\(?\d[\d\-(). ]*)", re.IGNORECASE
)
EMAIL_PATTERN = re.compile(r"Email\s*:\s*([^\s@]+@[^\s]+)", re.IGNORECASE)
# 1行目: 番地 / 2行目: "City, ST ZIP"
ADDRESS_PATTERN = re.compile(
    r"Address\s*:\s*([^\r\n]+)\r?\n\s*([^,\r\n]+),\s*([A-Z]{2})\s+(\d{5}(?:-\d{4})?)",
    re.IGNORECASE,
)


def _detect_account_number(text: str) -> str:
    m = ACCOUNT_NUMBER_PATTERN.search(text)
    if not m:
        raise FieldNotFoundError("account_number", "Account number not found in DEMOS document")
    return m.group(1)


def _detect_full_name(text: str) -> str:
    m = PATIENT_NAME_PATTERN.match(text)
    if not m:
        raise FieldNotFoundError("full_name", "Patient name not found in DEMOS document")
    return " ".join(m.group(1).split())


def _detect_date_of_birth(text: str) -> str:
    """
    生年月日を M/D/YYYY のまま返す。
    暦として正しいかどうかはここでは見ない（検証エンジンの担当）。
    """
    m = DATE_OF_BIRTH_PATTERN.search(text)
    if not m:
        raise FieldNotFoundError("date_of_birth", "Date of birth not found in DEMOS document")
    return m.group(1)


def _detect_phone_number(text: str) -> str:
    """
    携帯番号を優先し、無ければ自宅番号にフォールバックする。
    """
    m = MOBILE_PHONE_PATTERN.search(text) or HOME_PHONE_PATTERN.search(text)
    if not m:
        raise FieldNotFoundError("phone_number", "Phone number not found in DEMOS document")
    return m.group(1).strip()


def _detect_email(text: str) -> str:
    m = EMAIL_PATTERN.search(text)
    return m.group(1).strip() if m else ""


def _detect_address(text: str) -> Address:
    """
    住所は2行まとめて一致したときだけ採用する（部分一致は拾わない）。
    """
    m = ADDRESS_PATTERN.search(text)
    if not m:
        raise FieldNotFoundError("address", "Address not found in DEMOS document")
    street, city, state, zip_code = m.groups()
    return Address(
        street=street.strip(),
        city=city.strip(),
        state=state,
        zip=zip_code,
    )


def parse_demos_text(text: Optional[str]) -> DemographicRecord:
    """
    DEMOS ドキュメントのテキストから患者属性を抽出する。

    必須項目が見つからなければその時点で FieldNotFoundError を送出する。
    """
    text = text or ""
    record = DemographicRecord(
        account_number=_detect_account_number(text),
        full_name=_detect_full_name(text),
        date_of_birth=_detect_date_of_birth(text),
        phone_number=_detect_phone_number(text),
        email=_detect_email(text),
        address=_detect_address(text),
    )
    logger.debug("Parsed DEMOS for account %s", record.account_number)
    return record
