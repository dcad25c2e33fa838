from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import cast

import structlog

from doctrack.config import Config
from doctrack.core.storage.base import Storage
from doctrack.core.storage.factory import create_storage

logger = structlog.get_logger(__name__)


class Service:
    """Base class for services with direct storage access."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    from doctrack.core.modules.control_number.service import ControlNumberService  # noqa: PLC0415
    from doctrack.core.modules.counter.service import CounterService  # noqa: PLC0415
    from doctrack.core.modules.record.service import RecordService  # noqa: PLC0415

    counter: CounterService
    control_number: ControlNumberService
    record: RecordService

    def __init__(self, storage: Storage) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name)
        service_configs = [
            ("counter", "doctrack.core.modules.counter.service", "CounterService"),
            ("control_number", "doctrack.core.modules.control_number.service", "ControlNumberService"),
            ("record", "doctrack.core.modules.record.service", "RecordService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(storage)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, storage, and all service instances."""

    config: Config
    storage: Storage
    services: Services

    def __init__(self, config: Config) -> None:
        """Initialize core with config, the configured storage backend, and auto-register services."""
        self.config = config
        self.storage = create_storage(config)
        self.services = Services(self.storage)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Prepare storage, then start all services."""
        await self.storage.on_start()
        await self.services.start_all()
        logger.info("core_started", storage=type(self.storage).__name__)

    async def on_stop(self) -> None:
        """Stop services and release storage on shutdown."""
        await self.services.stop_all()
        await self.storage.close()
