from typing import Any
from uuid import UUID

import structlog

from doctrack.core.core import Service
from doctrack.core.modules.record.models import DeleteRecordResult, Record, RecordInput, RecordQuery, RecordStats
from doctrack.core.modules.section.models import Section
from doctrack.core.pagination import PaginationResult
from doctrack.core.storage.base import Storage
from doctrack.errors import ConflictError, NotFoundError, SequenceConflictError
from doctrack.utils import now

logger = structlog.get_logger(__name__)


class RecordService(Service):
    """Manages correspondence records. Control numbers are assigned only here, at creation."""

    def __init__(self, storage: Storage) -> None:
        super().__init__(storage)
        self._records = storage.records

    async def create_record(
        self, section: Section, date_received: str, data: RecordInput, created_by: str | None = None
    ) -> Record:
        """Create a record with freshly allocated office and section control numbers.

        The record is stored while the counters are still locked. If the store
        reports that a sequence is already taken (another process allocated it,
        or the counter lagged behind the records), the partition's counters are
        reset from the stored records and allocation is retried.
        """
        control_number = self.core.services.control_number
        attempts = self.core.config.allocation_attempts

        for attempt in range(1, attempts + 1):
            try:
                async with control_number.allocation(section, date_received) as numbers:
                    record = Record(
                        section=section,
                        date_received=date_received,
                        office_control_number=numbers.office_control_number,
                        section_control_number=numbers.section_control_number,
                        office_sequence=numbers.office_sequence,
                        section_sequence=numbers.section_sequence,
                        created_by=created_by,
                        updated_by=created_by,
                        **data.to_fields(),
                    )
                    await self._records.create(record)
            except SequenceConflictError as e:
                logger.warning(
                    "record_sequence_conflict",
                    section=section,
                    date_received=date_received,
                    attempt=attempt,
                    error=str(e),
                )
                await control_number.reset(section, date_received)
                continue

            logger.info(
                "record_created",
                record_id=record.id,
                office_control_number=record.office_control_number,
                section_control_number=record.section_control_number,
            )
            return record

        raise ConflictError(f"Could not allocate a unique control number for {section} on {date_received}, please retry")

    async def get_record(self, record_id: UUID) -> Record:
        record = await self._records.get(record_id)
        if record is None:
            raise NotFoundError(f"Record not found: {record_id}")
        return record

    async def list_records(self, query: RecordQuery, limit: int = 50, offset: int = 0) -> PaginationResult[Record]:
        """Get paginated records matching the query."""
        total = await self._records.count(query)
        items = await self._records.find(query, limit=limit, offset=offset)
        logger.debug("list_records", query=query.model_dump(exclude_none=True), total=total, returned=len(items))
        return PaginationResult(items=items, total=total, limit=limit, offset=offset)

    async def update_record(self, record_id: UUID, data: RecordInput, updated_by: str | None = None) -> Record:
        """Update descriptive fields (partial update).

        Section, date received and control numbers are fixed at creation and cannot be changed here.
        """
        changes: dict[str, Any] = data.to_fields(partial=True)
        changes["updated_at"] = now()
        if updated_by is not None:
            changes["updated_by"] = updated_by

        record = await self._records.update(record_id, changes)
        if record is None:
            raise NotFoundError(f"Record not found: {record_id}")
        return record

    async def delete_record(self, record_id: UUID) -> DeleteRecordResult:
        """Delete a record, then repair and re-check the counters of its partition.

        The deletion stands even if the repair fails; failures and remaining
        problems are reported as a warning.
        """
        record = await self._records.delete(record_id)
        if record is None:
            raise NotFoundError(f"Record not found: {record_id}")
        logger.info(
            "record_deleted",
            record_id=record_id,
            section=record.section,
            date_received=record.date_received,
            section_control_number=record.section_control_number,
        )

        control_number = self.core.services.control_number
        result = DeleteRecordResult()
        try:
            result.counters_reset = await control_number.reset(record.section, record.date_received)
            result.validation = await control_number.validate(record.section, record.date_received)
        except Exception:
            logger.exception(
                "counter_repair_failed", record_id=record_id, section=record.section, date_received=record.date_received
            )
            result.warning = (
                f"Record deleted, but control number repair failed for {record.section} on {record.date_received}; "
                "run a counter reset for this section and date"
            )
            return result

        if result.validation.has_problems:
            result.warning = (
                f"Record deleted; {len(result.validation.duplicates)} duplicate(s) and "
                f"{len(result.validation.issues)} missing number(s) remain for {record.section} on {record.date_received}"
            )
        return result

    async def get_stats(self, start_date: str | None = None, end_date: str | None = None) -> RecordStats:
        """Record totals per section and per action taken."""
        query = RecordQuery(start_date=start_date, end_date=end_date)
        return RecordStats(
            total_records=await self._records.count(query),
            by_section=await self._records.count_by("section", query),
            by_action_taken=await self._records.count_by("action_taken", query),
        )
