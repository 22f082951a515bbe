# src/clinicexport/models/export_row.py

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import List

# ──────────────────────────────────────────────
# 出力列の見出し（A〜AC の 29 列）。ExportRow のフィールド順と一致させること。
# ──────────────────────────────────────────────
COLUMN_HEADERS: tuple[str, ...] = (
    "Account Number",
    "Creditor",
    "Merchant/Provider",
    "Open Date",
    "Last Payment Date",
    "Last Statement Date",
    "Charge-Off Date",
    "Itemization Date",
    "Delinquency Date",
    "Balance as of Itemization",
    "Column K",
    "Column L",
    "Column M",
    "Total Due",
    "Debt Description",
    "Responsible Party Name",
    "Responsible Party DOB",
    "Address Street",
    "Address City",
    "Address State",
    "Address Zip",
    "Responsible Party Phone",
    "Email",
    "Column X",
    "Column Z",
    "Column AA",
    "Column AB",
    "Patient Name",
    "Patient DOB",
)

MINOR_COLUMN_HEADER = "Minor"


@dataclass(frozen=True)
class ExportRow:
    """
    スプレッドシート1行分（29セル + 未成年フラグ）。

    変換時点の SubjectRecord から毎回作り直す（キャッシュしない）。
    """
    account_number: str
    creditor: str
    merchant_provider: str
    open_date: str
    last_payment_date: str
    last_statement_date: str
    charge_off_date: str
    itemization_date: str
    delinquency_date: str
    balance_as_of_itemization: str
    blank_k: str
    blank_l: str
    blank_m: str
    total_due: str
    debt_description: str
    responsible_party_name: str
    responsible_party_dob: str
    address_street: str
    address_city: str
    address_state: str
    address_zip: str
    responsible_party_phone: str
    email: str
    blank_x: str
    blank_z: str
    static_aa: str
    static_ab: str
    patient_name: str
    patient_dob: str
    is_minor: bool = False

    def to_array(self) -> List[str]:
        """is_minor を除いた 29 セルを列順で返す。"""
        return [
            getattr(self, f.name)
            for f in fields(self)
            if f.name != "is_minor"
        ]
