from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog

from doctrack.core.core import Service
from doctrack.core.modules.control_number.formatter import format_control_number
from doctrack.core.modules.control_number.models import ControlNumbers, ResetResult, ValidationReport
from doctrack.core.modules.control_number.scan import find_duplicates, find_missing_sequences
from doctrack.core.modules.counter.models import CounterScope, counter_section
from doctrack.core.modules.section.models import Section

logger = structlog.get_logger(__name__)


class ControlNumberService(Service):
    """Renders, previews, validates and repairs control numbers on top of the counters."""

    @property
    def prefix(self) -> str:
        return self.core.config.control_number_prefix

    def format(self, scope: CounterScope, section: Section, date_received: str, sequence: int) -> str:
        return format_control_number(self.prefix, counter_section(scope, section), date_received, sequence)

    def _build(self, section: Section, date_received: str, office_sequence: int, section_sequence: int) -> ControlNumbers:
        return ControlNumbers(
            office_control_number=self.format(CounterScope.OFFICE, section, date_received, office_sequence),
            section_control_number=self.format(CounterScope.SECTION, section, date_received, section_sequence),
            office_sequence=office_sequence,
            section_sequence=section_sequence,
        )

    async def next_control_numbers(self, section: Section, date_received: str, commit: bool) -> ControlNumbers:
        """Preview (commit=False) or reserve (commit=True) the next pair of control numbers.

        A reservation that is never stored as a record is reclaimed by the
        counters' self-healing on the next allocation for the same day.
        """
        if commit:
            async with self.allocation(section, date_received) as numbers:
                return numbers

        counter = self.core.services.counter
        office_sequence = await counter.peek(CounterScope.OFFICE, None, date_received)
        section_sequence = await counter.peek(CounterScope.SECTION, section, date_received)
        return self._build(section, date_received, office_sequence, section_sequence)

    @asynccontextmanager
    async def allocation(self, section: Section, date_received: str) -> AsyncGenerator[ControlNumbers]:
        """Allocate both control numbers; other allocations in this process wait until the block exits."""
        async with self.core.services.counter.allocation(section, date_received) as (office_sequence, section_sequence):
            numbers = self._build(section, date_received, office_sequence, section_sequence)
            logger.info(
                "control_number_allocated",
                office_control_number=numbers.office_control_number,
                section_control_number=numbers.section_control_number,
            )
            yield numbers

    async def validate(self, section: Section, date_received: str) -> ValidationReport:
        """Report duplicate control numbers and sequence gaps.

        Office numbers are checked across every section of the day, section
        numbers within (section, day).
        """
        counter = self.core.services.counter
        duplicates = []
        issues = []
        for scope in (CounterScope.OFFICE, CounterScope.SECTION):
            records = await counter.partition_records(scope, section, date_received)
            duplicates.extend(find_duplicates(records, scope))
            for missing in find_missing_sequences(records, scope):
                control_number = self.format(scope, section, date_received, missing)
                issues.append(f"Missing {scope} control number {control_number} (sequence {missing})")

        report = ValidationReport.build(section, date_received, duplicates, issues)
        if report.has_problems:
            logger.warning(
                "control_number_problems",
                section=section,
                date_received=date_received,
                duplicates=len(duplicates),
                issues=len(issues),
            )
        return report

    async def reset(self, section: Section, date_received: str) -> ResetResult:
        """Bring both counters back in line with the records still stored for the partition."""
        highest_office, highest_section = await self.core.services.counter.reset(section, date_received)
        return ResetResult(highest_office=highest_office, highest_section=highest_section)
