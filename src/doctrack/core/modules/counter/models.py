"""Per-day sequence counters for the two numbering scopes."""

from enum import StrEnum

from doctrack.core.db import CamelModel, MongoModel
from doctrack.core.modules.section.models import Section


class CounterScope(StrEnum):
    """Numbering namespaces. OFFICE numbers are shared by all sections of a day."""

    OFFICE = "OFFICE"
    SECTION = "SECTION"


def counter_section(scope: CounterScope, section: Section | None) -> Section | None:
    """Section component of a counter key; office-wide counters are not partitioned by section."""
    return None if scope == CounterScope.OFFICE else section


class Counter(MongoModel):
    """Last issued sequence number for one (scope, section) pair.

    Sequences restart for every calendar day: current_number is only meaningful
    for last_date_used. Indexed on (scope, section) - unique.
    """

    scope: CounterScope
    section: Section | None = None  # Always None for OFFICE
    current_number: int = 0
    last_date_used: str | None = None  # YYYY-MM-DD


class CounterView(CamelModel):
    """Counter state (API representation)."""

    scope: CounterScope
    section: Section | None
    current_number: int
    last_date_used: str | None

    @classmethod
    def from_domain(cls, counter: Counter) -> "CounterView":
        return cls(
            scope=counter.scope,
            section=counter.section,
            current_number=counter.current_number,
            last_date_used=counter.last_date_used,
        )
