"""Metadata endpoints for exposing system information."""

from fastapi import APIRouter

from doctrack.core.modules.section.models import Section, SectionDefaults
from doctrack.web.deps import AppDep

router = APIRouter(tags=["metadata"])


@router.get(
    "/metadata/sections",
    summary="Get sections",
    description="Returns the section codes records and section control numbers are partitioned by.",
    operation_id="getSections",
    responses={200: {"description": "Section codes"}},
)
async def get_sections(app: AppDep) -> list[Section]:
    return app.get_sections()


@router.get(
    "/metadata/defaults",
    summary="Get form defaults",
    description="Returns the default sender and the usual receiving personnel for each section.",
    operation_id="getDefaults",
    responses={200: {"description": "Defaults per section"}},
)
async def get_defaults(app: AppDep) -> dict[Section, SectionDefaults]:
    return app.get_defaults()


@router.get(
    "/metadata/version",
    summary="Get version information",
    description="Returns build and version information including package version, git commit hash, commit date, and build time.",
    operation_id="getVersion",
    responses={200: {"description": "Version and build information"}},
)
async def get_version(app: AppDep) -> dict[str, str]:
    """Get version information."""
    return app.get_version()
