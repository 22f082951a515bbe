# src/clinicexport/logic/dates.py

from __future__ import annotations
from datetime import date
from typing import Optional
import re

# M/D/YYYY（月・日は1〜2桁）
US_DATE_PATTERN = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")


def parse_us_date(text: str) -> Optional[date]:
    """
    "M/D/YYYY" 形式の文字列を date に変換する。

    形式が違う、または実在しない日付 (13/40/2023 など) の場合は None。
    """
    if not text:
        return None
    m = US_DATE_PATTERN.fullmatch(text.strip())
    if not m:
        return None
    month, day, year = (int(g) for g in m.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def format_display_date(d: date) -> str:
    """画面表示用の MM/DD/YYYY（ロケール非依存・ゼロ埋め）。"""
    return f"{d.month:02d}/{d.day:02d}/{d.year:04d}"


def format_iso_date(d: date) -> str:
    """出力用の YYYY-MM-DD。"""
    return d.isoformat()
