"""Storage capabilities used by the services, independent of the backend."""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from doctrack.core.modules.counter.models import Counter, CounterScope
from doctrack.core.modules.record.models import Record, RecordQuery
from doctrack.core.modules.section.models import Section


class RecordStore(ABC):
    """Persists correspondence records."""

    @abstractmethod
    async def create(self, record: Record) -> None:
        """Insert a record.

        Raises:
            SequenceConflictError: If the record's office sequence is already used on its date,
                or its section sequence is already used in its (section, date).
        """

    @abstractmethod
    async def get(self, record_id: UUID) -> Record | None: ...

    @abstractmethod
    async def find(self, query: RecordQuery, limit: int | None = None, offset: int = 0) -> list[Record]:
        """Records matching the query, ordered by date received then creation time."""

    @abstractmethod
    async def count(self, query: RecordQuery) -> int: ...

    @abstractmethod
    async def count_by(self, field: str, query: RecordQuery) -> dict[str, int]:
        """Number of matching records per distinct value of a field; missing values count under ""."""

    @abstractmethod
    async def update(self, record_id: UUID, changes: dict[str, Any]) -> Record | None:
        """Set the given fields and return the updated record, or None if it does not exist."""

    @abstractmethod
    async def delete(self, record_id: UUID) -> Record | None:
        """Delete a record and return it, or None if it did not exist."""


class CounterStore(ABC):
    """Persists one counter per (scope, section)."""

    @abstractmethod
    async def get(self, scope: CounterScope, section: Section | None) -> Counter | None: ...

    @abstractmethod
    async def upsert(self, scope: CounterScope, section: Section | None, current_number: int, last_date_used: str) -> Counter:
        """Write both counter values, creating the counter if needed."""

    @abstractmethod
    async def set_current_number(self, scope: CounterScope, section: Section | None, current_number: int) -> bool:
        """Overwrite current_number of an existing counter; returns False if there is none."""

    @abstractmethod
    async def list_all(self) -> list[Counter]: ...


class Storage(ABC):
    """Backend bundle selected at startup."""

    records: RecordStore
    counters: CounterStore

    async def on_start(self) -> None:
        """Prepare the backend (indexes, connections)."""

    async def close(self) -> None:
        """Release backend resources on shutdown."""
