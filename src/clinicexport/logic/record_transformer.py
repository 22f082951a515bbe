# src/clinicexport/logic/record_transformer.py

from __future__ import annotations
from datetime import date
from typing import List, Optional

from clinicexport.logic.dates import format_iso_date
from clinicexport.logic.minor_status import is_minor
from clinicexport.models.export_row import COLUMN_HEADERS, ExportRow
from clinicexport.models.subject_record import SubjectRecord

# ──────────────────────────────────────────────
# 固定値セル
# ──────────────────────────────────────────────
CREDITOR_NAME = "Mathers Clinic, LLC"
ITEMIZATION_DATE_LABEL = "last statement"
DEBT_DESCRIPTION = "deductible / coinsurance / copay"
STATIC_FLAG = "N"


def transform_subject(record: SubjectRecord, today: Optional[date] = None) -> ExportRow:
    """
    SubjectRecord を出力行に変換する。

    失敗したレコードでもプレビューできるよう、欠けている項目は空文字列に
    するだけで例外は出さない。Open Date は変換した日の日付。
    """
    today = today or date.today()
    demos = record.demographic
    stmt = record.statement
    address = demos.address

    return ExportRow(
        account_number=demos.account_number,
        creditor=CREDITOR_NAME,
        merchant_provider=CREDITOR_NAME,
        open_date=format_iso_date(today),
        last_payment_date=stmt.last_payment_date,
        last_statement_date="",
        charge_off_date="",
        itemization_date=ITEMIZATION_DATE_LABEL,
        delinquency_date="",
        balance_as_of_itemization=stmt.amount_due,
        blank_k="",
        blank_l="",
        blank_m="",
        total_due=stmt.amount_due,
        debt_description=DEBT_DESCRIPTION,
        responsible_party_name=demos.full_name,
        responsible_party_dob=demos.date_of_birth,
        address_street=address.street,
        address_city=address.city,
        address_state=address.state,
        address_zip=address.zip,
        responsible_party_phone=demos.phone_number,
        email=demos.email,
        blank_x="",
        blank_z="",
        static_aa=STATIC_FLAG,
        static_ab=STATIC_FLAG,
        patient_name=demos.full_name,
        patient_dob=demos.date_of_birth,
        is_minor=is_minor(demos.date_of_birth, today),
    )


def get_column_headers() -> List[str]:
    return list(COLUMN_HEADERS)
