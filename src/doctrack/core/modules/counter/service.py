import asyncio
from collections import defaultdict
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog

from doctrack.core.core import Service
from doctrack.core.modules.control_number.scan import highest_sequence
from doctrack.core.modules.counter.models import Counter, CounterScope, counter_section
from doctrack.core.modules.record.models import Record, RecordQuery
from doctrack.core.modules.section.models import Section
from doctrack.core.storage.base import Storage

logger = structlog.get_logger(__name__)

CounterKey = tuple[CounterScope, Section | None]


class CounterService(Service):
    """Allocates and repairs the per-day sequence counters.

    Every read-modify-write of a counter runs under the asyncio lock of its
    (scope, section) key. Locks are always taken OFFICE before SECTION.
    """

    def __init__(self, storage: Storage) -> None:
        super().__init__(storage)
        self._counters = storage.counters
        self._records = storage.records
        self._locks: defaultdict[CounterKey, asyncio.Lock] = defaultdict(asyncio.Lock)

    def _lock(self, scope: CounterScope, section: Section | None) -> asyncio.Lock:
        return self._locks[(scope, counter_section(scope, section))]

    async def partition_records(self, scope: CounterScope, section: Section | None, date_received: str) -> list[Record]:
        """Records whose numbers share the scope's namespace: the whole day for OFFICE, (section, day) for SECTION."""
        if scope == CounterScope.OFFICE:
            return await self._records.find(RecordQuery(date_received=date_received))
        return await self._records.find(RecordQuery(section=section, date_received=date_received))

    async def _base(self, scope: CounterScope, section: Section | None, date_received: str, counter: Counter | None) -> int:
        """Last sequence to continue from.

        A new day (or a never-used counter) starts from 0. Otherwise the stored
        value is trusted unless the records show a lower maximum, which means
        numbers were freed without the counter being repaired.
        """
        if counter is None or counter.last_date_used != date_received:
            return 0

        records = await self.partition_records(scope, section, date_received)
        actual = highest_sequence(records, scope)
        if actual < counter.current_number:
            logger.info(
                "counter_self_healed",
                scope=scope,
                section=counter.section,
                date_received=date_received,
                stored=counter.current_number,
                actual=actual,
            )
            return actual
        return counter.current_number

    async def _advance(self, scope: CounterScope, section: Section | None, date_received: str) -> int:
        key_section = counter_section(scope, section)
        counter = await self._counters.get(scope, key_section)
        next_number = await self._base(scope, section, date_received, counter) + 1
        await self._counters.upsert(scope, key_section, next_number, date_received)
        logger.debug("sequence_allocated", scope=scope, section=key_section, date_received=date_received, sequence=next_number)
        return next_number

    async def allocate(self, scope: CounterScope, section: Section | None, date_received: str) -> int:
        """Advance the counter and return the new sequence number."""
        async with self._lock(scope, section):
            return await self._advance(scope, section, date_received)

    async def peek(self, scope: CounterScope, section: Section | None, date_received: str) -> int:
        """Sequence number the next allocation would return, without advancing the counter.

        Takes no lock: a concurrent allocation can make the preview stale.
        """
        counter = await self._counters.get(scope, counter_section(scope, section))
        return await self._base(scope, section, date_received, counter) + 1

    @asynccontextmanager
    async def allocation(self, section: Section, date_received: str) -> AsyncGenerator[tuple[int, int]]:
        """Allocate the office and section sequences for a new record.

        Both locks stay held until the block exits, so the record can be stored
        before any other allocation in this process reads the counters.
        """
        async with self._lock(CounterScope.OFFICE, None), self._lock(CounterScope.SECTION, section):
            office_sequence = await self._advance(CounterScope.OFFICE, section, date_received)
            section_sequence = await self._advance(CounterScope.SECTION, section, date_received)
            yield office_sequence, section_sequence

    async def reset(self, section: Section, date_received: str) -> tuple[int, int]:
        """Overwrite both counters with the highest sequences still stored for the partition.

        last_date_used is left untouched; a counter that was never allocated stays absent.
        Returns (highest_office, highest_section).
        """
        highest: dict[CounterScope, int] = {}
        for scope in (CounterScope.OFFICE, CounterScope.SECTION):
            async with self._lock(scope, section):
                records = await self.partition_records(scope, section, date_received)
                highest[scope] = highest_sequence(records, scope)
                await self._counters.set_current_number(scope, counter_section(scope, section), highest[scope])

        logger.info(
            "counters_reset",
            section=section,
            date_received=date_received,
            highest_office=highest[CounterScope.OFFICE],
            highest_section=highest[CounterScope.SECTION],
        )
        return highest[CounterScope.OFFICE], highest[CounterScope.SECTION]

    async def list_counters(self) -> list[Counter]:
        return await self._counters.list_all()
