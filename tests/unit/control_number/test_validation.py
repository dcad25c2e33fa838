"""Tests for duplicate and gap reporting."""

from conftest import DATE, make_record

from doctrack.core.modules.counter.models import CounterScope
from doctrack.core.modules.record.models import RecordInput, RecordQuery
from doctrack.core.modules.section.models import Section


class TestValidate:
    """Tests for ControlNumberService.validate."""

    async def test_clean_partition(self, core):
        """Test that consecutive records pass validation."""
        for _ in range(3):
            await core.services.record.create_record(Section.INVES, DATE, RecordInput())

        report = await core.services.control_number.validate(Section.INVES, DATE)

        assert report.has_problems is False
        assert report.status == "ok"
        assert report.duplicates == []
        assert report.issues == []

    async def test_duplicate_section_number_reported_once(self, core):
        """Test that two records sharing a section control number give one SECTION duplicate."""
        number = "RFU4A-INVES-260218-02"
        first = make_record(office=1, section_seq=None, section_control_number=number)
        second = make_record(office=2, section_seq=None, section_control_number=number)
        await core.storage.records.create(first)
        await core.storage.records.create(second)

        report = await core.services.control_number.validate(Section.INVES, DATE)

        section_duplicates = [d for d in report.duplicates if d.type == CounterScope.SECTION]
        assert len(section_duplicates) == 1
        assert section_duplicates[0].control_number == number
        assert set(section_duplicates[0].ids) == {first.id, second.id}
        assert report.has_problems is True
        assert report.status == "issues_found"

    async def test_gap_reported_with_reconstructed_number(self, core):
        """Test that section sequences 1, 2, 4, 5 report the missing 3."""
        for office, section_seq in ((1, 1), (2, 2), (3, 4), (4, 5)):
            await core.storage.records.create(make_record(office=office, section_seq=section_seq))

        report = await core.services.control_number.validate(Section.INVES, DATE)

        assert report.duplicates == []
        assert len(report.issues) == 1
        assert "RFU4A-INVES-260218-03" in report.issues[0]
        assert report.has_problems is True

    async def test_office_gap_checked_across_sections(self, core):
        """Test that office gaps consider every section of the day."""
        await core.storage.records.create(make_record(section=Section.INVES, office=1, section_seq=1))
        await core.storage.records.create(make_record(section=Section.ADM, office=2, section_seq=1))
        await core.storage.records.create(make_record(section=Section.INVES, office=3, section_seq=2))

        report = await core.services.control_number.validate(Section.INVES, DATE)

        assert report.has_problems is False

    async def test_office_gap_reported(self, core):
        """Test that a missing office number is reported with the office code."""
        await core.storage.records.create(make_record(section=Section.INVES, office=1, section_seq=1))
        await core.storage.records.create(make_record(section=Section.INVES, office=3, section_seq=2))

        report = await core.services.control_number.validate(Section.INVES, DATE)

        assert len(report.issues) == 1
        assert "RFU4A-MC-260218-02" in report.issues[0]

    async def test_validate_does_not_modify(self, core):
        """Test that validation leaves records and counters untouched."""
        for n in (1, 3):
            await core.storage.records.create(make_record(office=n, section_seq=n))

        await core.services.control_number.validate(Section.INVES, DATE)

        assert await core.storage.counters.list_all() == []
        assert len(await core.storage.records.find(RecordQuery(date_received=DATE))) == 2

