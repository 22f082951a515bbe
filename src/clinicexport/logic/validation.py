# src/clinicexport/logic/validation.py
"""
患者レコードの検証。

- errors: 必須欠落・形式不正・ありえない日付（未来日）
- warnings: 電話番号の桁数・メール形式・未成年（要目視確認）

入力を変更しない純粋関数で、自身が例外を送出することはない。
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
import re

from clinicexport.logic.dates import parse_us_date
from clinicexport.logic.minor_status import age_in_years, is_minor
from clinicexport.models.demographic_record import DemographicRecord
from clinicexport.models.statement_record import StatementRecord
from clinicexport.models.subject_record import SubjectRecord

DIGITS_ONLY = re.compile(r"\d+")
STATE_PATTERN = re.compile(r"[A-Z]{2}")
ZIP_PATTERN = re.compile(r"\d{5}(?:-\d{4})?")
AMOUNT_PATTERN = re.compile(r"\d+(?:\.\d{2})?")
PHONE_SEPARATORS = re.compile(r"[\s\-().+]")


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    is_minor: bool = False

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _validate_demographic(
    demos: DemographicRecord, today: date, result: ValidationResult
) -> None:
    errors = result.errors
    warnings = result.warnings

    if not demos.account_number:
        errors.append("Account number is required")
    elif not DIGITS_ONLY.fullmatch(demos.account_number):
        errors.append(f"Account number must contain digits only: {demos.account_number}")

    if not demos.full_name:
        errors.append("Patient name is required")
    elif len(demos.full_name.strip()) < 2:
        errors.append(f"Patient name is too short: {demos.full_name}")

    if not demos.date_of_birth:
        errors.append("Date of birth is required")
    else:
        dob = parse_us_date(demos.date_of_birth)
        if dob is None:
            errors.append(f"Date of birth is not a valid date: {demos.date_of_birth}")
        elif dob > today:
            errors.append(f"Date of birth is in the future: {demos.date_of_birth}")
        elif is_minor(demos.date_of_birth, today):
            age = age_in_years(dob, today)
            warnings.append(
                f"Patient is a minor (age {int(age)}); manual review required"
            )

    if not demos.phone_number:
        errors.append("Phone number is required")
    else:
        digits = PHONE_SEPARATORS.sub("", demos.phone_number)
        if not (digits.isdigit() and len(digits) in (10, 11)):
            warnings.append(
                f"Phone number should have 10 or 11 digits: {demos.phone_number}"
            )

    if demos.email and "@" not in demos.email:
        warnings.append(f"Email address looks malformed: {demos.email}")

    address = demos.address
    if not address.street:
        errors.append("Street address is required")
    if not address.city:
        errors.append("City is required")
    if not address.state:
        errors.append("State is required")
    elif not STATE_PATTERN.fullmatch(address.state):
        errors.append(f"State must be a two-letter uppercase code: {address.state}")
    if not address.zip:
        errors.append("ZIP code is required")
    elif not ZIP_PATTERN.fullmatch(address.zip):
        errors.append(f"ZIP code must be 5 digits or ZIP+4: {address.zip}")


def _validate_statement(
    stmt: StatementRecord, today: date, result: ValidationResult
) -> None:
    errors = result.errors

    if not stmt.amount_due:
        errors.append("Amount due is required")
    elif not AMOUNT_PATTERN.fullmatch(stmt.amount_due):
        errors.append(f"Amount due is not a valid amount: {stmt.amount_due}")

    if stmt.last_payment_date:
        paid = parse_us_date(stmt.last_payment_date)
        if paid is None:
            errors.append(f"Last payment date is not a valid date: {stmt.last_payment_date}")
        elif paid > today:
            errors.append(f"Last payment date is in the future: {stmt.last_payment_date}")


def validate_subject(record: SubjectRecord, today: Optional[date] = None) -> ValidationResult:
    """
    SubjectRecord を検証して errors / warnings を返す。

    同じ入力・同じ today なら何度呼んでも同じ結果になる。
    """
    today = today or date.today()
    result = ValidationResult(
        is_minor=is_minor(record.demographic.date_of_birth, today),
    )
    _validate_demographic(record.demographic, today, result)
    _validate_statement(record.statement, today, result)
    return result
