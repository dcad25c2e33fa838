"""Tests for the pure scans over a partition's records."""

from conftest import make_record

from doctrack.core.modules.control_number.scan import find_duplicates, find_missing_sequences, highest_sequence
from doctrack.core.modules.counter.models import CounterScope
from doctrack.core.modules.section.models import Section


class TestHighestSequence:
    """Tests for highest_sequence."""

    def test_empty_partition_is_zero(self):
        """Test that a partition without records yields 0."""
        assert highest_sequence([], CounterScope.SECTION) == 0

    def test_highest_of_each_scope(self):
        """Test that office and section maxima are computed independently."""
        records = [make_record(office=4, section_seq=1), make_record(office=2, section_seq=3)]
        assert highest_sequence(records, CounterScope.OFFICE) == 4
        assert highest_sequence(records, CounterScope.SECTION) == 3

    def test_legacy_rows_parsed_from_string(self):
        """Test that rows without stored sequences fall back to the control number suffix."""
        record = make_record(
            office=None,
            section_seq=None,
            office_control_number="RFU4A-MC-260218-09",
            section_control_number="RFU4A-INVES-260218-05",
        )
        assert highest_sequence([record], CounterScope.OFFICE) == 9
        assert highest_sequence([record], CounterScope.SECTION) == 5

    def test_unparseable_rows_ignored(self):
        """Test that malformed legacy control numbers are skipped."""
        records = [
            make_record(office=None, section_seq=None, office_control_number="bad", section_control_number="bad"),
            make_record(office=2, section_seq=2),
        ]
        assert highest_sequence(records, CounterScope.SECTION) == 2


class TestFindDuplicates:
    """Tests for find_duplicates."""

    def test_no_duplicates(self):
        """Test that distinct control numbers produce no report."""
        records = [make_record(office=1, section_seq=1), make_record(office=2, section_seq=2)]
        assert find_duplicates(records, CounterScope.SECTION) == []

    def test_shared_string_reported_with_all_ids(self):
        """Test that every record holding the same string is listed."""
        first = make_record(office=1, section_seq=1)
        second = make_record(office=2, section_seq=1)
        third = make_record(office=3, section_seq=2)

        duplicates = find_duplicates([first, second, third], CounterScope.SECTION)

        assert len(duplicates) == 1
        assert duplicates[0].control_number == "RFU4A-INVES-260218-01"
        assert duplicates[0].type == CounterScope.SECTION
        assert duplicates[0].ids == [first.id, second.id]

    def test_office_duplicates_across_sections(self):
        """Test that office numbers collide regardless of section."""
        records = [
            make_record(section=Section.INVES, office=1, section_seq=1),
            make_record(section=Section.ADM, office=1, section_seq=1),
        ]
        duplicates = find_duplicates(records, CounterScope.OFFICE)
        assert [d.control_number for d in duplicates] == ["RFU4A-MC-260218-01"]


class TestFindMissingSequences:
    """Tests for find_missing_sequences."""

    def test_contiguous_sequences(self):
        """Test that 1..3 has no gaps."""
        records = [make_record(section_seq=n) for n in (1, 2, 3)]
        assert find_missing_sequences(records, CounterScope.SECTION) == []

    def test_gaps_listed_ascending(self):
        """Test that {1, 2, 4, 7} reports 3, 5 and 6."""
        records = [make_record(section_seq=n) for n in (7, 1, 4, 2)]
        assert find_missing_sequences(records, CounterScope.SECTION) == [3, 5, 6]

    def test_numbers_below_lowest_not_reported(self):
        """Test that a partition starting at 3 does not report 1 and 2."""
        records = [make_record(section_seq=n) for n in (3, 4)]
        assert find_missing_sequences(records, CounterScope.SECTION) == []

    def test_duplicates_do_not_create_gaps(self):
        """Test that repeated sequences are treated as one."""
        records = [make_record(section_seq=n) for n in (1, 1, 2)]
        assert find_missing_sequences(records, CounterScope.SECTION) == []
