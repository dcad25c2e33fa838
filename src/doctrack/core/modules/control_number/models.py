from typing import Literal
from uuid import UUID

from pydantic import Field

from doctrack.core.db import CamelModel
from doctrack.core.modules.counter.models import CounterScope
from doctrack.core.modules.section.models import Section


class ControlNumbers(CamelModel):
    """The pair of control numbers a record carries."""

    office_control_number: str = Field(..., description="Office-wide control number, e.g. RFU4A-MC-260218-01")
    section_control_number: str = Field(..., description="Section control number, e.g. RFU4A-INVES-260218-01")
    office_sequence: int = Field(..., exclude=True)
    section_sequence: int = Field(..., exclude=True)


class DuplicateControlNumber(CamelModel):
    """A control number string carried by more than one record."""

    control_number: str
    type: CounterScope
    ids: list[UUID]


class ValidationReport(CamelModel):
    """Duplicates and sequence gaps found for one (section, date) partition. Advisory only."""

    section: Section
    date_received: str
    duplicates: list[DuplicateControlNumber]
    issues: list[str]
    has_problems: bool
    status: Literal["ok", "issues_found"]

    @classmethod
    def build(
        cls, section: Section, date_received: str, duplicates: list[DuplicateControlNumber], issues: list[str]
    ) -> "ValidationReport":
        has_problems = bool(duplicates or issues)
        return cls(
            section=section,
            date_received=date_received,
            duplicates=duplicates,
            issues=issues,
            has_problems=has_problems,
            status="issues_found" if has_problems else "ok",
        )


class ResetResult(CamelModel):
    """Highest sequences still present after a counter repair."""

    highest_office: int
    highest_section: int
