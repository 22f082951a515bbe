# src/clinicexport/logic/minor_status.py
"""
未成年判定。

検証エンジンの警告と、出力行の is_minor はどちらもここを呼ぶ。
年齢 = (today - 生年月日).days / 365.25
"""

from __future__ import annotations
from datetime import date
from typing import Optional

from clinicexport.logic.dates import parse_us_date

ADULT_AGE_YEARS = 18
DAYS_PER_YEAR = 365.25


def age_in_years(dob: date, today: Optional[date] = None) -> float:
    today = today or date.today()
    return (today - dob).days / DAYS_PER_YEAR


def is_minor_date(dob: date, today: Optional[date] = None) -> bool:
    return age_in_years(dob, today) < ADULT_AGE_YEARS


def is_minor(date_of_birth: str, today: Optional[date] = None) -> bool:
    """
    生年月日文字列 (M/D/YYYY) から未成年かどうかを返す。
    日付として解釈できない場合は False（判定不能は未成年扱いしない）。
    """
    dob = parse_us_date(date_of_birth)
    if dob is None:
        return False
    return is_minor_date(dob, today)
