from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import Field

from doctrack.core.db import CamelModel
from doctrack.core.modules.control_number.models import ControlNumbers, ValidationReport
from doctrack.core.modules.counter.models import CounterView
from doctrack.web.deps import AppDep
from doctrack.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["control-numbers"])


class NextControlNumbersRequest(CamelModel):
    """Request to preview or reserve the next control numbers of a section and day."""

    section: str | None = Field(None, description="Section code: INVES, INTEL, ADM or OPN")
    date_received: str | None = Field(None, description="Date the document was received (YYYY-MM-DD)")
    commit: bool = Field(False, description="Advance the counters (true) or only preview (false)")

    model_config = {"json_schema_extra": {"examples": [{"section": "INVES", "dateReceived": "2026-02-18", "commit": False}]}}


class ResetCountersRequest(CamelModel):
    """Request to repair the counters of a section and day."""

    section: str | None = Field(None, description="Section code: INVES, INTEL, ADM or OPN")
    date_received: str | None = Field(None, description="Date the document was received (YYYY-MM-DD)")


class ResetCountersResponse(CamelModel):
    """Counter values after the repair, plus a fresh validation of the partition."""

    highest_office: int = Field(..., description="Highest office sequence still stored for the day")
    highest_section: int = Field(..., description="Highest section sequence still stored for the section and day")
    validation: ValidationReport


@router.post(
    "/control-numbers/next",
    summary="Get next control numbers",
    description=(
        "Returns the next office-wide and section control numbers for the given section and day. "
        "With `commit=false` (default) the counters are not touched. With `commit=true` the counters advance; "
        "a reservation that is never stored as a record is reclaimed by the next allocation for that day. "
        "Records get their numbers from `createRecord`, which allocates them atomically with the insert."
    ),
    operation_id="nextControlNumbers",
    responses={
        200: {"description": "Office and section control numbers"},
        400: {"model": ErrorResponse, "description": "Missing or invalid section or date"},
    },
)
async def next_control_numbers(request: NextControlNumbersRequest, app: AppDep) -> ControlNumbers:
    return await app.next_control_numbers(request.section, request.date_received, request.commit)


@router.get(
    "/control-numbers/validate",
    summary="Validate control numbers",
    description=(
        "Reports duplicate control numbers and missing sequence numbers. Office numbers are checked across "
        "every section of the day, section numbers within the section and day. Nothing is modified."
    ),
    operation_id="validateControlNumbers",
    responses={
        200: {"description": "Validation report"},
        400: {"model": ErrorResponse, "description": "Missing or invalid section or date"},
    },
)
async def validate_control_numbers(
    app: AppDep,
    section: Annotated[str | None, Query(description="Section code")] = None,
    date_received: Annotated[str | None, Query(alias="dateReceived", description="Date received (YYYY-MM-DD)")] = None,
) -> ValidationReport:
    return await app.validate_control_numbers(section, date_received)


@router.post(
    "/control-numbers/reset",
    summary="Reset counters",
    description=(
        "Sets the office and section counters to the highest sequence numbers still stored, "
        "so the next allocation continues right after them. Safe to repeat."
    ),
    operation_id="resetCounters",
    responses={
        200: {"description": "Counters repaired"},
        400: {"model": ErrorResponse, "description": "Missing or invalid section or date"},
    },
)
async def reset_counters(request: ResetCountersRequest, app: AppDep) -> ResetCountersResponse:
    highest_office, highest_section, validation = await app.reset_counters(request.section, request.date_received)
    return ResetCountersResponse(highest_office=highest_office, highest_section=highest_section, validation=validation)


@router.get(
    "/control-numbers/counters",
    summary="List counters",
    description="Returns the stored counter rows. Intended for diagnosing numbering problems.",
    operation_id="listCounters",
    responses={200: {"description": "Counter rows"}},
)
async def list_counters(app: AppDep) -> list[CounterView]:
    return await app.get_counters()
