from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="DocTrack API",
            version=app.version,
            summary="Incoming correspondence tracking with per-day office and section control numbers",
            routes=app.routes,
            tags=[
                {"name": "control-numbers", "description": "Allocation, validation and repair of control numbers"},
                {"name": "records", "description": "Correspondence records"},
                {"name": "metadata", "description": "Sections, form defaults and build information"},
            ],
        )

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Section is required", "type": "validation_error"},
                {"message": "Record not found", "type": "not_found"},
                {"message": "Control number allocation conflict, please retry", "type": "conflict"},
            ]
        }
    }
