"""
Tests for subject validation and the shared minor-status rule.
"""

from dataclasses import replace
from datetime import date

import pytest

from clinicexport.logic.minor_status import age_in_years, is_minor
from clinicexport.logic.record_transformer import transform_subject
from clinicexport.logic.validation import validate_subject
from clinicexport.models.demographic_record import Address
from clinicexport.models.subject_record import SubjectRecord
from clinicexport.parser.demos_parser import parse_demos_text
from clinicexport.parser.stmt_parser import parse_stmt_text

TODAY = date(2025, 1, 15)


@pytest.fixture
def record(demos_text, stmt_text) -> SubjectRecord:
    return SubjectRecord(
        subject_id="18420",
        demographic=parse_demos_text(demos_text),
        statement=parse_stmt_text(stmt_text),
        processed=True,
    )


def with_demos(record: SubjectRecord, **changes) -> SubjectRecord:
    return replace(record, demographic=replace(record.demographic, **changes))


class TestValidateSubject:
    def test_clean_record(self, record):
        result = validate_subject(record, TODAY)
        assert result.errors == []
        assert result.warnings == []
        assert result.is_valid
        assert not result.is_minor

    def test_empty_record_lists_every_required_field(self):
        result = validate_subject(SubjectRecord(subject_id="1"), TODAY)
        assert result.errors == [
            "Account number is required",
            "Patient name is required",
            "Date of birth is required",
            "Phone number is required",
            "Street address is required",
            "City is required",
            "State is required",
            "ZIP code is required",
            "Amount due is required",
        ]

    def test_is_idempotent_and_pure(self, record):
        before = replace(record)
        first = validate_subject(record, TODAY)
        second = validate_subject(record, TODAY)
        assert first == second
        assert record == before

    @pytest.mark.parametrize(
        "changes, expected",
        [
            ({"account_number": "18A20"}, "Account number must contain digits only"),
            ({"full_name": "X"}, "Patient name is too short"),
            ({"date_of_birth": "13/40/2023"}, "Date of birth is not a valid date"),
            ({"date_of_birth": "02/01/2030"}, "Date of birth is in the future"),
            ({"address": Address("1 Rd", "Town", "il", "62704")}, "State must be a two-letter"),
            ({"address": Address("1 Rd", "Town", "IL", "6270")}, "ZIP code must be 5 digits"),
        ],
    )
    def test_format_errors(self, record, changes, expected):
        result = validate_subject(with_demos(record, **changes), TODAY)
        assert len(result.errors) == 1
        assert result.errors[0].startswith(expected)

    def test_phone_format_is_only_a_warning(self, record):
        result = validate_subject(with_demos(record, phone_number="555-1234"), TODAY)
        assert result.errors == []
        assert len(result.warnings) == 1
        assert "Phone number" in result.warnings[0]

    def test_eleven_digit_phone_is_accepted(self, record):
        result = validate_subject(with_demos(record, phone_number="1 (555) 123-4567"), TODAY)
        assert result.warnings == []

    def test_statement_errors(self, record):
        statement = replace(record.statement, amount_due="12.5", last_payment_date="03/01/2025")
        result = validate_subject(replace(record, statement=statement), TODAY)
        assert result.errors == [
            "Amount due is not a valid amount: 12.5",
            "Last payment date is in the future: 03/01/2025",
        ]

    def test_whole_dollar_amount_is_valid(self, record):
        statement = replace(record.statement, amount_due="824")
        assert validate_subject(replace(record, statement=statement), TODAY).errors == []

    def test_minor_is_a_warning(self, record):
        result = validate_subject(with_demos(record, date_of_birth="06/15/2010"), TODAY)
        assert result.errors == []
        assert result.is_minor
        assert len(result.warnings) == 1
        assert "minor" in result.warnings[0]


class TestMinorStatus:
    def test_age_uses_julian_year(self):
        assert age_in_years(date(2000, 1, 1), date(2000, 1, 1)) == 0
        assert age_in_years(date(2000, 1, 1), date(2001, 1, 1)) == pytest.approx(366 / 365.25)

    def test_eighteenth_birthday_boundary(self):
        assert not is_minor("01/15/2007", TODAY)
        assert is_minor("01/16/2007", TODAY)

    def test_unparseable_date_is_not_minor(self):
        assert not is_minor("", TODAY)
        assert not is_minor("13/40/2023", TODAY)

    @pytest.mark.parametrize(
        "dob",
        ["01/15/2007", "01/16/2007", "1/1/1990", "12/31/2020", "02/29/2008", "13/40/2023", ""],
    )
    def test_validation_and_export_agree(self, record, dob):
        subject = with_demos(record, date_of_birth=dob)
        assert validate_subject(subject, TODAY).is_minor == transform_subject(subject, TODAY).is_minor
