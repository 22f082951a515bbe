"""
Tests for the STMT field parser.
"""

import pytest

from clinicexport.errors import FieldNotFoundError
from clinicexport.parser.stmt_parser import parse_stmt_text


class TestParseStmtText:
    def test_extracts_all_fields(self, stmt_text):
        record = parse_stmt_text(stmt_text)

        assert record.amount_due == "824.00"
        assert record.last_payment_date == "12/02/2024"
        assert record.service_codes == ["99213", "99214"]
        assert record.visit_dates == [
            "12/15/2024",
            "12/02/2024",
            "10/28/2024",
            "09/14/2024",
            "10/01/2024",
        ]

    def test_no_received_dates_is_not_an_error(self):
        record = parse_stmt_text("Amount Due $10.00\n")
        assert record.last_payment_date == ""
        assert record.visit_dates == []
        assert record.service_codes == []

    def test_missing_amount_due_fails_the_whole_parse(self, stmt_text):
        with pytest.raises(FieldNotFoundError) as exc_info:
            parse_stmt_text(stmt_text.replace("Amount Due $824.00", "Balance 824.00"))
        assert exc_info.value.field_name == "amount_due"

    def test_thousands_separators_are_stripped(self):
        assert parse_stmt_text("Amount Due $1,234,567.89").amount_due == "1234567.89"

    def test_most_recent_received_date_is_zero_padded(self):
        text = (
            "Amount Due $5.00\n"
            "received date 3/7/2023\n"
            "Received Date 1/15/2024\n"
            "Received Date 11/30/2023\n"
        )
        assert parse_stmt_text(text).last_payment_date == "01/15/2024"

    def test_invalid_received_dates_are_skipped(self):
        text = "Amount Due $5.00\nReceived Date 13/45/2024\nReceived Date 2/1/2022\n"
        assert parse_stmt_text(text).last_payment_date == "02/01/2022"

    def test_duplicates_are_kept_in_order(self):
        text = "Amount Due $5.00\nCPT: 99213 on 1/1/2024\nCPT: 99213 on 1/1/2024\nCPT 36415\n"
        record = parse_stmt_text(text)
        assert record.service_codes == ["99213", "99213", "36415"]
        assert record.visit_dates == ["1/1/2024", "1/1/2024"]
