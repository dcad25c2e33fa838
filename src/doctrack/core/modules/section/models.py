"""Organizational sections that partition records and section-scoped counters."""

from enum import StrEnum

from pydantic import Field

from doctrack.core.db import CamelModel


class Section(StrEnum):
    """Fixed set of office sections."""

    INVES = "INVES"  # Investigation
    INTEL = "INTEL"  # Intelligence
    ADM = "ADM"  # Administration
    OPN = "OPN"  # Operations


class SectionDefaults(CamelModel):
    """Form defaults offered when a record is created for a section."""

    sender: str = Field(..., description="Default originating office")
    received_by: list[str] = Field(..., description="Personnel who usually receive correspondence for the section")


SECTION_DEFAULTS: dict[Section, SectionDefaults] = {
    Section.INVES: SectionDefaults(sender="IND", received_by=["NUP TALA"]),
    Section.OPN: SectionDefaults(sender="OMD", received_by=["NUP Aldrin", "PCPL Bueno", "PAT Duyag"]),
    Section.INTEL: SectionDefaults(sender="ID", received_by=["NUP Joyce", "PCPL Jose"]),
    Section.ADM: SectionDefaults(sender="ARMD", received_by=["NUP San Pedro", "PMSG Foncardas"]),
}
