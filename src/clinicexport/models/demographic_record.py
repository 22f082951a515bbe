# src/clinicexport/models/demographic_record.py

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class Address:
    """
    住所（2行構成: 番地行 + "City, ST ZIP" 行）。
    """
    street: str = ""
    city: str = ""
    state: str = ""   # 2文字の州コード
    zip: str = ""     # 5桁 または ZIP+4


@dataclass
class DemographicRecord:
    """
    DEMOS ドキュメントから抽出した患者属性。

    - account_number: アカウント番号（数字のみ）
    - full_name: 氏名（テキスト先頭の大文字表記）
    - date_of_birth: 生年月日 (M/D/YYYY のまま保持)
    - phone_number: 電話番号（区切り文字は元のまま）
    - email: 任意項目。無ければ空文字列
    """
    account_number: str = ""
    full_name: str = ""
    date_of_birth: str = ""
    phone_number: str = ""
    email: str = ""
    address: Address = field(default_factory=Address)

    @classmethod
    def empty(cls) -> "DemographicRecord":
        return cls()
