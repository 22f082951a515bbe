"""
Tests for grouping document paths into DEMOS/STMT pairs.
"""

from pathlib import Path

import pytest

from clinicexport.errors import InputFormatError
from clinicexport.models.document_pair import DocumentRole
from clinicexport.parser.pair_resolver import (
    UNPARSABLE_SUBJECT_ID,
    detect_role,
    extract_subject_id,
    resolve_pairs,
)


class TestExtractSubjectId:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("18420_demos.pdf", "18420"),
            ("99-stmt.pdf", "99"),
            ("007 DEMOS.pdf", "007"),
            ("/tmp/in/123_stmt.pdf", "123"),
        ],
    )
    def test_leading_digits_before_separator(self, name, expected):
        assert extract_subject_id(name) == expected

    @pytest.mark.parametrize("name", ["demos_18420.pdf", "18420demos.pdf", "abc.pdf"])
    def test_rejects_names_without_identifier(self, name):
        with pytest.raises(InputFormatError, match="Invalid filename format"):
            extract_subject_id(name)


class TestDetectRole:
    def test_case_insensitive_keywords(self):
        assert detect_role("1_DEMOS.pdf") is DocumentRole.DEMOGRAPHIC
        assert detect_role("1_Stmt.PDF") is DocumentRole.STATEMENT

    def test_unknown_role(self):
        with pytest.raises(InputFormatError, match="Cannot determine document type"):
            detect_role("1_notes.pdf")

    def test_both_keywords_is_ambiguous(self):
        with pytest.raises(InputFormatError, match="Ambiguous"):
            detect_role("1_demos_stmt.pdf")

    def test_custom_keywords(self):
        assert detect_role("1_profile.pdf", "profile", "bill") is DocumentRole.DEMOGRAPHIC


class TestResolvePairs:
    def test_groups_by_identifier_in_first_seen_order(self):
        result = resolve_pairs(
            ["2_stmt.pdf", "1_demos.pdf", "2_demos.pdf", "1_stmt.pdf", "3_demos.pdf"]
        )

        assert list(result.pairs) == ["2", "1", "3"]
        assert result.pairs["2"].is_complete
        assert result.pairs["1"].demographic == Path("1_demos.pdf")
        assert result.pairs["1"].statement == Path("1_stmt.pdf")
        assert not result.pairs["3"].is_complete
        assert result.pairs["3"].statement is None
        assert result.rejected == []
        assert result.unparsable is None

    def test_duplicate_role_is_last_write_wins(self):
        result = resolve_pairs(["5_demos_a.pdf", "5_demos_b.pdf", "5_stmt.pdf"])

        pair = result.pairs["5"]
        assert pair.demographic == Path("5_demos_b.pdf")
        assert pair.overwritten == [Path("5_demos_a.pdf")]

    def test_bad_paths_go_to_unparsable_bucket(self):
        result = resolve_pairs(["x_demos.pdf", "4_notes.pdf", "4_demos.pdf"])

        assert list(result.pairs) == ["4"]
        assert len(result.rejected) == 2
        bucket = result.unparsable
        assert bucket is not None
        assert bucket.subject_id == UNPARSABLE_SUBJECT_ID
        assert any("x_demos.pdf" in e for e in bucket.errors)
        assert any("4_notes.pdf" in e for e in bucket.errors)
