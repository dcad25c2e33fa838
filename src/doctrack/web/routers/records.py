from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import Field

from doctrack.core.modules.record.models import DeleteRecordResult, RecordInput, RecordStats, RecordView
from doctrack.core.pagination import PaginationResult
from doctrack.web.deps import AppDep
from doctrack.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["records"])

REQUEST_ONLY_FIELDS = {"section", "date_received", "created_by", "updated_by"}


class CreateRecordRequest(RecordInput):
    """Request to create a record. Control numbers are assigned by the server."""

    section: str | None = Field(None, description="Section code: INVES, INTEL, ADM or OPN")
    date_received: str | None = Field(None, description="Date the document was received (YYYY-MM-DD)")
    created_by: str | None = Field(None, description="Name of the person encoding the record")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "section": "INVES",
                    "dateReceived": "2026-02-18",
                    "subject": "Request for case folder",
                    "sender": "IND",
                    "receivedBy": "NUP TALA",
                    "actionTaken": "Pending",
                    "remarksEmail": True,
                }
            ]
        }
    }


class UpdateRecordRequest(RecordInput):
    """Request to update descriptive fields (partial update). Section and date received cannot change."""

    updated_by: str | None = Field(None, description="Name of the person editing the record")


@router.get(
    "/records",
    summary="List records",
    description=(
        "Get paginated records ordered by date received, then creation time. "
        "`search` matches subject, sender and both control numbers (case-insensitive)."
    ),
    operation_id="listRecords",
    responses={
        200: {"description": "Paginated list of records"},
        400: {"model": ErrorResponse, "description": "Invalid section or date filter"},
    },
)
async def list_records(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, le=500, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
    section: Annotated[str | None, Query(description="Section code")] = None,
    date_received: Annotated[str | None, Query(alias="dateReceived", description="Exact date received")] = None,
    start_date: Annotated[str | None, Query(alias="startDate", description="Earliest date received")] = None,
    end_date: Annotated[str | None, Query(alias="endDate", description="Latest date received")] = None,
    action_taken: Annotated[str | None, Query(alias="actionTaken", description="Action status")] = None,
    search: Annotated[str | None, Query(description="Free-text search")] = None,
) -> PaginationResult[RecordView]:
    return await app.get_records(limit, offset, section, date_received, start_date, end_date, action_taken, search)


@router.get(
    "/records/stats",
    summary="Record statistics",
    description="Record totals per section and per action taken, optionally within a date range.",
    operation_id="getRecordStats",
    responses={
        200: {"description": "Record statistics"},
        400: {"model": ErrorResponse, "description": "Invalid date"},
    },
)
async def get_record_stats(
    app: AppDep,
    start_date: Annotated[str | None, Query(alias="startDate", description="Earliest date received")] = None,
    end_date: Annotated[str | None, Query(alias="endDate", description="Latest date received")] = None,
) -> RecordStats:
    return await app.get_record_stats(start_date, end_date)


@router.get(
    "/records/{record_id}",
    summary="Get record",
    operation_id="getRecord",
    responses={
        200: {"description": "Record details"},
        404: {"model": ErrorResponse, "description": "Record not found"},
    },
)
async def get_record(record_id: UUID, app: AppDep) -> RecordView:
    return await app.get_record(record_id)


@router.post(
    "/records",
    summary="Create record",
    description=(
        "Create a record. Office and section control numbers are allocated for the section and date received "
        "and stored together with the record."
    ),
    operation_id="createRecord",
    status_code=201,
    responses={
        201: {"description": "Record created successfully"},
        400: {"model": ErrorResponse, "description": "Missing or invalid section or date"},
        409: {"model": ErrorResponse, "description": "Could not allocate a unique control number"},
    },
)
async def create_record(request: CreateRecordRequest, app: AppDep) -> RecordView:
    data = RecordInput.model_validate(request.model_dump(exclude=REQUEST_ONLY_FIELDS))
    return await app.create_record(request.section, request.date_received, data, request.created_by)


@router.patch(
    "/records/{record_id}",
    summary="Update record",
    description="Partially update descriptive fields. Only the fields provided are changed.",
    operation_id="updateRecord",
    responses={
        200: {"description": "Record updated successfully"},
        404: {"model": ErrorResponse, "description": "Record not found"},
    },
)
async def update_record(record_id: UUID, request: UpdateRecordRequest, app: AppDep) -> RecordView:
    data = RecordInput.model_validate(request.model_dump(exclude_unset=True, exclude=REQUEST_ONLY_FIELDS))
    return await app.update_record(record_id, data, request.updated_by)


@router.delete(
    "/records/{record_id}",
    summary="Delete record",
    description=(
        "Delete a record, then reset the counters of its section and day and re-validate them. "
        "The deletion is never rolled back: repair problems are reported in `warning`."
    ),
    operation_id="deleteRecord",
    responses={
        200: {"description": "Record deleted, with the counter repair outcome"},
        404: {"model": ErrorResponse, "description": "Record not found"},
    },
)
async def delete_record(record_id: UUID, app: AppDep) -> DeleteRecordResult:
    return await app.delete_record(record_id)
