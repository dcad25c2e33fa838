"""In-process storage backend (database_url = memory://).

State lives for the lifetime of the process. Used for local runs and tests;
uniqueness of sequence numbers is enforced the same way as the MongoDB indexes.
"""

from collections import Counter as Tally
from typing import Any
from uuid import UUID

from doctrack.core.modules.counter.models import Counter, CounterScope
from doctrack.core.modules.record.models import SEARCH_FIELDS, Record, RecordQuery
from doctrack.core.modules.section.models import Section
from doctrack.core.storage.base import CounterStore, RecordStore, Storage
from doctrack.errors import SequenceConflictError


def matches(record: Record, query: RecordQuery) -> bool:
    """In-memory equivalent of the MongoDB filter built from a RecordQuery."""
    if query.section is not None and record.section != query.section:
        return False
    if query.date_received is not None and record.date_received != query.date_received:
        return False
    if query.start_date is not None and record.date_received < query.start_date:
        return False
    if query.end_date is not None and record.date_received > query.end_date:
        return False
    if query.action_taken is not None and record.action_taken != query.action_taken:
        return False
    if query.search:
        needle = query.search.lower()
        return any(needle in (getattr(record, field) or "").lower() for field in SEARCH_FIELDS)
    return True


class MemoryRecordStore(RecordStore):
    def __init__(self) -> None:
        self._records: dict[UUID, Record] = {}

    def _check_sequences(self, record: Record) -> None:
        for existing in self._records.values():
            if existing.date_received != record.date_received:
                continue
            if record.office_sequence is not None and existing.office_sequence == record.office_sequence:
                raise SequenceConflictError(f"Office sequence {record.office_sequence} already used on {record.date_received}")
            if (
                record.section_sequence is not None
                and existing.section == record.section
                and existing.section_sequence == record.section_sequence
            ):
                raise SequenceConflictError(
                    f"Section sequence {record.section_sequence} already used for {record.section} on {record.date_received}"
                )

    async def create(self, record: Record) -> None:
        self._check_sequences(record)
        self._records[record.id] = record.model_copy(deep=True)

    async def get(self, record_id: UUID) -> Record | None:
        record = self._records.get(record_id)
        return record.model_copy(deep=True) if record else None

    async def find(self, query: RecordQuery, limit: int | None = None, offset: int = 0) -> list[Record]:
        found = sorted(
            (record for record in self._records.values() if matches(record, query)),
            key=lambda record: (record.date_received, record.created_at),
        )
        end = None if limit is None else offset + limit
        return [record.model_copy(deep=True) for record in found[offset:end]]

    async def count(self, query: RecordQuery) -> int:
        return sum(1 for record in self._records.values() if matches(record, query))

    async def count_by(self, field: str, query: RecordQuery) -> dict[str, int]:
        tally = Tally(getattr(record, field) or "" for record in self._records.values() if matches(record, query))
        return {str(key): value for key, value in tally.items()}

    async def update(self, record_id: UUID, changes: dict[str, Any]) -> Record | None:
        record = self._records.get(record_id)
        if record is None:
            return None
        updated = record.model_copy(update=changes, deep=True)
        self._records[record_id] = updated
        return updated.model_copy(deep=True)

    async def delete(self, record_id: UUID) -> Record | None:
        return self._records.pop(record_id, None)


class MemoryCounterStore(CounterStore):
    def __init__(self) -> None:
        self._counters: dict[tuple[CounterScope, Section | None], Counter] = {}

    async def get(self, scope: CounterScope, section: Section | None) -> Counter | None:
        counter = self._counters.get((scope, section))
        return counter.model_copy() if counter else None

    async def upsert(self, scope: CounterScope, section: Section | None, current_number: int, last_date_used: str) -> Counter:
        counter = self._counters.get((scope, section)) or Counter(scope=scope, section=section)
        counter = counter.model_copy(update={"current_number": current_number, "last_date_used": last_date_used})
        self._counters[(scope, section)] = counter
        return counter.model_copy()

    async def set_current_number(self, scope: CounterScope, section: Section | None, current_number: int) -> bool:
        counter = self._counters.get((scope, section))
        if counter is None:
            return False
        self._counters[(scope, section)] = counter.model_copy(update={"current_number": current_number})
        return True

    async def list_all(self) -> list[Counter]:
        return [counter.model_copy() for counter in self._counters.values()]


class MemoryStorage(Storage):
    def __init__(self) -> None:
        self.records = MemoryRecordStore()
        self.counters = MemoryCounterStore()
