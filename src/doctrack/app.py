from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version
from uuid import UUID

from doctrack.config import Config
from doctrack.core.core import Core
from doctrack.core.modules.control_number.models import ControlNumbers, ValidationReport
from doctrack.core.modules.counter.models import CounterView
from doctrack.core.modules.record.models import DeleteRecordResult, RecordInput, RecordQuery, RecordStats, RecordView
from doctrack.core.modules.record.validators import validate_optional_date, validate_partition, validate_section
from doctrack.core.modules.section.models import SECTION_DEFAULTS, Section, SectionDefaults
from doctrack.core.pagination import PaginationResult


class App:
    """Facade for all application operations, validates request input before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def next_control_numbers(self, section: str | None, date_received: str | None, commit: bool = False) -> ControlNumbers:
        """Preview or reserve the next office and section control numbers."""
        valid_section, valid_date = validate_partition(section, date_received)
        return await self._core.services.control_number.next_control_numbers(valid_section, valid_date, commit)

    async def validate_control_numbers(self, section: str | None, date_received: str | None) -> ValidationReport:
        """Check a (section, date) partition for duplicate control numbers and gaps."""
        valid_section, valid_date = validate_partition(section, date_received)
        return await self._core.services.control_number.validate(valid_section, valid_date)

    async def reset_counters(self, section: str | None, date_received: str | None) -> tuple[int, int, ValidationReport]:
        """Repair both counters from the stored records, then re-validate the partition.

        Returns (highest_office, highest_section, validation).
        """
        valid_section, valid_date = validate_partition(section, date_received)
        control_number = self._core.services.control_number
        result = await control_number.reset(valid_section, valid_date)
        validation = await control_number.validate(valid_section, valid_date)
        return result.highest_office, result.highest_section, validation

    async def get_counters(self) -> list[CounterView]:
        """Get all counter rows."""
        counters = await self._core.services.counter.list_counters()
        return [CounterView.from_domain(counter) for counter in counters]

    async def create_record(
        self, section: str | None, date_received: str | None, data: RecordInput, created_by: str | None = None
    ) -> RecordView:
        """Create a record; control numbers are allocated by the server."""
        valid_section, valid_date = validate_partition(section, date_received)
        record = await self._core.services.record.create_record(valid_section, valid_date, data, created_by)
        return RecordView.from_domain(record)

    async def get_records(
        self,
        limit: int = 50,
        offset: int = 0,
        section: str | None = None,
        date_received: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        action_taken: str | None = None,
        search: str | None = None,
    ) -> PaginationResult[RecordView]:
        """Get paginated records, optionally filtered."""
        query = RecordQuery(
            section=validate_section(section) if section else None,
            date_received=validate_optional_date(date_received, "dateReceived"),
            start_date=validate_optional_date(start_date, "startDate"),
            end_date=validate_optional_date(end_date, "endDate"),
            action_taken=action_taken or None,
            search=search.strip() if search and search.strip() else None,
        )
        page = await self._core.services.record.list_records(query, limit, offset)
        return PaginationResult(
            items=[RecordView.from_domain(record) for record in page.items],
            total=page.total,
            limit=page.limit,
            offset=page.offset,
        )

    async def get_record(self, record_id: UUID) -> RecordView:
        record = await self._core.services.record.get_record(record_id)
        return RecordView.from_domain(record)

    async def update_record(self, record_id: UUID, data: RecordInput, updated_by: str | None = None) -> RecordView:
        """Update descriptive fields of a record (partial update)."""
        record = await self._core.services.record.update_record(record_id, data, updated_by)
        return RecordView.from_domain(record)

    async def delete_record(self, record_id: UUID) -> DeleteRecordResult:
        """Delete a record and repair the counters of its partition."""
        return await self._core.services.record.delete_record(record_id)

    async def get_record_stats(self, start_date: str | None = None, end_date: str | None = None) -> RecordStats:
        return await self._core.services.record.get_stats(
            validate_optional_date(start_date, "startDate"), validate_optional_date(end_date, "endDate")
        )

    def get_sections(self) -> list[Section]:
        return list(Section)

    def get_defaults(self) -> dict[Section, SectionDefaults]:
        return SECTION_DEFAULTS

    def get_version(self) -> dict[str, str]:
        """Get package version and build information."""
        try:
            package_version = version("doctrack")
        except PackageNotFoundError:
            package_version = "unknown"
        config = self._core.config
        return {
            "version": package_version,
            "git_commit_hash": config.git_commit_hash,
            "git_commit_date": config.git_commit_date,
            "build_time": config.build_time,
        }

