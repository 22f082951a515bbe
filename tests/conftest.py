from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Dict

import pytest

from clinicexport.errors import TextExtractionError

DEMOS_TEXT = """CHRISTOPHER RIVERA - Patient Demographics
Account Number: 18420
Date of Birth: 01/01/2000
Home Phone Number: (555) 000-1111
Cell Phone Number: (555) 123-4567
Email: chris@example.com
Address: 123 Main St.
Springfield, IL 62704
"""

STMT_TEXT = """Mathers Clinic, LLC
Statement Date 12/15/2024
Amount Due $824.00
Received Date 12/02/2024  Payment  -$25.00
Received Date 10/28/2024  Payment  -$40.00
Date of Service 09/14/2024 CPT: 99213
Date of Service 10/01/2024 CPT: 99214
"""

FIXED_TODAY = date(2026, 10, 18)


class FakeExtractor:
    """Serves canned text by file name and records every call."""

    def __init__(self, texts: Dict[str, str]) -> None:
        self.texts = dict(texts)
        self.calls: list[str] = []

    def __call__(self, path: Path) -> str:
        name = Path(path).name
        self.calls.append(name)
        if name not in self.texts:
            raise TextExtractionError(path, "no such document")
        return self.texts[name]


def demos_text_for(account: str, name: str = "JANE DOE", dob: str = "03/04/1980") -> str:
    return (
        f"{name} - Patient Demographics\n"
        f"Account Number: {account}\n"
        f"Date of Birth: {dob}\n"
        "Mobile Phone Number: 555-222-3333\n"
        "Address: 9 Elm Road\n"
        "Shelbyville, IL 62565\n"
    )


def stmt_text_for(amount: str = "100.00") -> str:
    return f"Amount Due ${amount}\nReceived Date 01/05/2024\n"


@pytest.fixture
def demos_text() -> str:
    return DEMOS_TEXT


@pytest.fixture
def stmt_text() -> str:
    return STMT_TEXT


@pytest.fixture
def today() -> date:
    return FIXED_TODAY
