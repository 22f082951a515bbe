# src/clinicexport/models/statement_record.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List


@dataclass
class StatementRecord:
    """
    STMT ドキュメントから抽出した請求情報。

    - last_payment_date: "Received Date" の中で最も新しい日付 (MM/DD/YYYY)。無ければ ""
    - amount_due: 請求額（小数2桁、桁区切りカンマは除去済み）
    - visit_dates: 本文中に出てくる日付すべて（出現順・重複あり）
    - service_codes: CPT コード（出現順・重複あり）
    """
    last_payment_date: str = ""
    amount_due: str = ""
    visit_dates: List[str] = field(default_factory=list)
    service_codes: List[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "StatementRecord":
        return cls()
