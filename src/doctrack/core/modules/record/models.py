from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from doctrack.core.db import CamelModel, MongoModel
from doctrack.core.modules.control_number.formatter import parse_sequence
from doctrack.core.modules.control_number.models import ResetResult, ValidationReport
from doctrack.core.modules.counter.models import CounterScope
from doctrack.core.modules.record.utils import normalize_remarks
from doctrack.core.modules.section.models import Section
from doctrack.utils import now

# Fields matched by the free-text `search` filter
SEARCH_FIELDS = ("subject", "sender", "office_control_number", "section_control_number")


class RecordDetails(CamelModel):
    """Descriptive fields of a record. Never used for numbering."""

    subject: str | None = Field(None, description="Subject or nature of the correspondence")
    sender: str | None = Field(None, description="Originating office or person")
    sender_type: str | None = Field(None, description="Kind of sender, e.g. office or individual")
    target_date: str | None = Field(None, description="Deadline for action (YYYY-MM-DD)")
    target_date_mode: str | None = Field(None, description="How the target date was set")
    received_by: str | None = Field(None, description="Personnel who received the document")
    action_taken: str | None = Field(None, description="Current action status, e.g. Pending")
    remarks: str | None = Field(None, description="Free-form remarks or delivery channels")
    concerned_units: str | None = Field(None, description="Units the document concerns")
    date_sent: str | None = Field(None, description="Date the document was forwarded (YYYY-MM-DD)")


class RecordInput(RecordDetails):
    """Descriptive fields as submitted; remark channel flags are folded into `remarks`."""

    remarks_email: bool = Field(False, description="Received by email")
    remarks_viber: bool = Field(False, description="Received via Viber")
    remarks_hard_copy: bool = Field(False, description="Received as hard copy")

    def to_fields(self, partial: bool = False) -> dict[str, Any]:
        """Storable field values; with partial=True only the fields that were provided."""
        fields = self.model_dump(exclude_unset=partial, exclude={"remarks_email", "remarks_viber", "remarks_hard_copy"})
        remarks = normalize_remarks(self.remarks, self.remarks_email, self.remarks_viber, self.remarks_hard_copy)
        if remarks != self.remarks:
            fields["remarks"] = remarks
        return fields


class Record(MongoModel):
    """Incoming correspondence with its office-wide and section control numbers."""

    section: Section
    date_received: str  # YYYY-MM-DD
    office_control_number: str
    section_control_number: str
    # Integer sequences; None for rows stored before they were kept alongside the strings
    office_sequence: int | None = None
    section_sequence: int | None = None
    subject: str | None = None
    sender: str | None = None
    sender_type: str | None = None
    target_date: str | None = None
    target_date_mode: str | None = None
    received_by: str | None = None
    action_taken: str | None = None
    remarks: str | None = None
    concerned_units: str | None = None
    date_sent: str | None = None
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def control_number(self, scope: CounterScope) -> str:
        if scope == CounterScope.OFFICE:
            return self.office_control_number
        return self.section_control_number

    def sequence(self, scope: CounterScope) -> int | None:
        """Sequence number in the given scope, parsed from the control number for legacy rows."""
        stored = self.office_sequence if scope == CounterScope.OFFICE else self.section_sequence
        if stored is not None:
            return stored
        return parse_sequence(self.control_number(scope))


class RecordQuery(BaseModel):
    """Record filters shared by all storage backends. Unset fields do not filter."""

    section: Section | None = None
    date_received: str | None = None
    start_date: str | None = None  # Inclusive lower bound on date_received
    end_date: str | None = None  # Inclusive upper bound on date_received
    action_taken: str | None = None
    search: str | None = None  # Case-insensitive substring over SEARCH_FIELDS


class RecordView(RecordDetails):
    """Record (API representation)."""

    id: UUID
    section: Section
    date_received: str
    office_control_number: str
    section_control_number: str
    office_sequence: int | None
    section_sequence: int | None
    created_by: str | None
    updated_by: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, record: Record) -> "RecordView":
        return cls.model_validate(record.model_dump())


class RecordStats(CamelModel):
    """Record counts, optionally restricted to a date range."""

    total_records: int
    by_section: dict[str, int]
    by_action_taken: dict[str, int]


class DeleteRecordResult(CamelModel):
    """Outcome of a deletion. Repair problems never fail the deletion itself."""

    ok: bool = True
    counters_reset: ResetResult | None = None
    validation: ValidationReport | None = None
    warning: str | None = None
