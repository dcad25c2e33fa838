"""Tests for the in-process storage backend."""

import pytest
from conftest import DATE, make_record

from doctrack.core.modules.counter.models import CounterScope
from doctrack.core.modules.record.models import RecordQuery
from doctrack.core.modules.section.models import Section
from doctrack.core.storage.memory import MemoryCounterStore, MemoryRecordStore, matches
from doctrack.errors import SequenceConflictError


class TestMemoryRecordStore:
    """Tests for MemoryRecordStore."""

    async def test_office_sequence_unique_per_date(self):
        """Test that an office sequence cannot repeat on the same date, whatever the section."""
        store = MemoryRecordStore()
        await store.create(make_record(section=Section.INVES, office=1, section_seq=1))

        with pytest.raises(SequenceConflictError):
            await store.create(make_record(section=Section.ADM, office=1, section_seq=1))
        await store.create(make_record(section=Section.ADM, date_received="2026-02-19", office=1, section_seq=1))

    async def test_section_sequence_unique_per_section_and_date(self):
        """Test that a section sequence cannot repeat within its section and date."""
        store = MemoryRecordStore()
        await store.create(make_record(section=Section.INVES, office=1, section_seq=1))

        with pytest.raises(SequenceConflictError):
            await store.create(make_record(section=Section.INVES, office=2, section_seq=1))
        await store.create(make_record(section=Section.INTEL, office=2, section_seq=1))

    async def test_legacy_rows_not_checked(self):
        """Test that rows without integer sequences are accepted as stored."""
        store = MemoryRecordStore()
        await store.create(make_record(office=None, section_seq=None))
        await store.create(make_record(office=None, section_seq=None))

        assert await store.count(RecordQuery(date_received=DATE)) == 2

    async def test_returned_records_are_copies(self):
        """Test that modifying a returned record does not change the stored one."""
        store = MemoryRecordStore()
        record = make_record(subject="original")
        await store.create(record)

        fetched = await store.get(record.id)
        fetched.subject = "changed"

        assert (await store.get(record.id)).subject == "original"

    async def test_update_and_delete(self):
        """Test that update returns the new state and delete returns the removed record."""
        store = MemoryRecordStore()
        record = make_record()
        await store.create(record)

        updated = await store.update(record.id, {"action_taken": "Done"})
        deleted = await store.delete(record.id)

        assert updated.action_taken == "Done"
        assert deleted.id == record.id
        assert await store.get(record.id) is None
        assert await store.delete(record.id) is None
        assert await store.update(record.id, {"action_taken": "Done"}) is None

    async def test_count_by_missing_values(self):
        """Test that records without a value are counted under an empty key."""
        store = MemoryRecordStore()
        await store.create(make_record(office=1, section_seq=1, action_taken="Pending"))
        await store.create(make_record(office=2, section_seq=2))

        assert await store.count_by("action_taken", RecordQuery()) == {"Pending": 1, "": 1}


class TestMatches:
    """Tests for the in-memory record filter."""

    def test_empty_query_matches_everything(self):
        """Test that a query without filters matches any record."""
        assert matches(make_record(), RecordQuery())

    def test_search_is_case_insensitive(self):
        """Test that search matches subject, sender and control numbers regardless of case."""
        record = make_record(subject="Fuel Request", sender="IND")
        assert matches(record, RecordQuery(search="fuel"))
        assert matches(record, RecordQuery(search="ind"))
        assert matches(record, RecordQuery(search="rfu4a-mc"))
        assert not matches(record, RecordQuery(search="leave"))

    def test_filters_combine(self):
        """Test that every provided filter must match."""
        record = make_record(section=Section.OPN, action_taken="Pending")
        assert matches(record, RecordQuery(section=Section.OPN, action_taken="Pending", end_date=DATE))
        assert not matches(record, RecordQuery(section=Section.OPN, action_taken="Done"))
        assert not matches(record, RecordQuery(start_date="2026-02-19"))


class TestMemoryCounterStore:
    """Tests for MemoryCounterStore."""

    async def test_upsert_and_get(self):
        """Test that upsert creates then overwrites a counter."""
        store = MemoryCounterStore()
        await store.upsert(CounterScope.SECTION, Section.INVES, 1, DATE)
        await store.upsert(CounterScope.SECTION, Section.INVES, 2, DATE)

        counter = await store.get(CounterScope.SECTION, Section.INVES)
        assert (counter.current_number, counter.last_date_used) == (2, DATE)
        assert await store.get(CounterScope.SECTION, Section.ADM) is None
        assert len(await store.list_all()) == 1

    async def test_set_current_number_requires_existing_counter(self):
        """Test that only existing counters are overwritten, keeping last_date_used."""
        store = MemoryCounterStore()
        assert await store.set_current_number(CounterScope.OFFICE, None, 3) is False

        await store.upsert(CounterScope.OFFICE, None, 5, DATE)
        assert await store.set_current_number(CounterScope.OFFICE, None, 3) is True

        counter = await store.get(CounterScope.OFFICE, None)
        assert (counter.current_number, counter.last_date_used) == (3, DATE)
