"""Shared pytest fixtures. Everything runs on the in-process storage backend."""

from collections.abc import AsyncGenerator
from uuid import uuid4

import httpx
import pytest

from doctrack.app import App
from doctrack.config import Config
from doctrack.core.core import Core
from doctrack.core.modules.control_number.formatter import format_control_number
from doctrack.core.modules.record.models import Record
from doctrack.core.modules.section.models import Section
from doctrack.web.server import create_fastapi_app

PREFIX = "RFU4A"
DATE = "2026-02-18"


@pytest.fixture
def config() -> Config:
    return Config(database_url="memory://", control_number_prefix=PREFIX, allocation_attempts=3)


@pytest.fixture
async def core(config: Config) -> AsyncGenerator[Core]:
    """Started core on a fresh memory backend."""
    core = Core(config)
    async with core.lifespan():
        yield core


@pytest.fixture
async def client(config: Config) -> AsyncGenerator[httpx.AsyncClient]:
    """HTTP client bound to the FastAPI app; the app lifespan is entered explicitly."""
    app = App(config)
    fastapi_app = create_fastapi_app(app, config)
    async with app.lifespan():
        transport = httpx.ASGITransport(app=fastapi_app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
            yield http_client


def make_record(
    section: Section = Section.INVES,
    date_received: str = DATE,
    office: int | None = 1,
    section_seq: int | None = 1,
    office_control_number: str | None = None,
    section_control_number: str | None = None,
    **fields,
) -> Record:
    """Build a record with control numbers rendered from the given sequences."""
    return Record(
        id=uuid4(),
        section=section,
        date_received=date_received,
        office_control_number=office_control_number
        or format_control_number(PREFIX, None, date_received, office if office is not None else 0),
        section_control_number=section_control_number
        or format_control_number(PREFIX, section, date_received, section_seq if section_seq is not None else 0),
        office_sequence=office,
        section_sequence=section_seq,
        **fields,
    )
