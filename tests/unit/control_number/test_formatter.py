"""Tests for control number rendering and parsing."""

from doctrack.core.modules.control_number.formatter import format_control_number, parse_sequence, short_date
from doctrack.core.modules.section.models import Section


class TestFormatControlNumber:
    """Tests for format_control_number."""

    def test_section_number(self):
        """Test that a section number carries the section code."""
        assert format_control_number("PREFIX", Section.INVES, "2026-02-18", 1) == "PREFIX-INVES-260218-01"

    def test_office_number(self):
        """Test that a missing section renders the office-wide code."""
        assert format_control_number("PREFIX", None, "2026-02-18", 1) == "PREFIX-MC-260218-01"

    def test_sequence_padded_to_two_digits(self):
        """Test that sequences below 10 get a leading zero."""
        assert format_control_number("RFU4A", Section.ADM, "2026-12-01", 7).endswith("-261201-07")
        assert format_control_number("RFU4A", Section.ADM, "2026-12-01", 42).endswith("-261201-42")

    def test_large_sequence_not_truncated(self):
        """Test that sequences of three or more digits are rendered in full."""
        assert format_control_number("RFU4A", Section.OPN, "2026-02-18", 123) == "RFU4A-OPN-260218-123"

    def test_short_date(self):
        """Test that the date renders as YYMMDD."""
        assert short_date("2026-02-18") == "260218"
        assert short_date("2030-01-05") == "300105"


class TestParseSequence:
    """Tests for parse_sequence."""

    def test_trailing_group_parsed(self):
        """Test that the trailing numeric group is returned as an integer."""
        assert parse_sequence("RFU4A-INVES-260218-01") == 1
        assert parse_sequence("RFU4A-MC-260218-123") == 123

    def test_malformed_strings_return_none(self):
        """Test that strings without a trailing numeric group return None."""
        assert parse_sequence("RFU4A-INVES-260218-") is None
        assert parse_sequence("RFU4A-INVES-260218-AB") is None
        assert parse_sequence("garbage") is None

    def test_empty_values_return_none(self):
        """Test that empty or missing control numbers return None."""
        assert parse_sequence("") is None
        assert parse_sequence(None) is None
