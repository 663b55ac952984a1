from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from photogallery.config import Config


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
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

    from photogallery.core.modules.access.service import AccessService  # noqa: PLC0415
    from photogallery.core.modules.comment.service import CommentService  # noqa: PLC0415
    from photogallery.core.modules.counter.service import CounterService  # noqa: PLC0415
    from photogallery.core.modules.identity.service import IdentityService  # noqa: PLC0415
    from photogallery.core.modules.kv.service import KeyValueService  # noqa: PLC0415
    from photogallery.core.modules.like.service import LikeService  # noqa: PLC0415
    from photogallery.core.modules.photo.service import PhotoService  # noqa: PLC0415
    from photogallery.core.modules.ratelimit.service import RateLimitService  # noqa: PLC0415
    from photogallery.core.modules.session.service import SessionService  # noqa: PLC0415

    kv: KeyValueService
    counter: CounterService
    session: SessionService
    access: AccessService
    ratelimit: RateLimitService
    identity: IdentityService
    like: LikeService
    comment: CommentService
    photo: PhotoService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._database = database

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters for initialization - kv must be first
        service_configs = [
            ("kv", "photogallery.core.modules.kv.service", "KeyValueService"),
            ("counter", "photogallery.core.modules.counter.service", "CounterService"),
            ("session", "photogallery.core.modules.session.service", "SessionService"),
            ("access", "photogallery.core.modules.access.service", "AccessService"),
            ("ratelimit", "photogallery.core.modules.ratelimit.service", "RateLimitService"),
            ("identity", "photogallery.core.modules.identity.service", "IdentityService"),
            ("like", "photogallery.core.modules.like.service", "LikeService"),
            ("comment", "photogallery.core.modules.comment.service", "CommentService"),
            ("photo", "photogallery.core.modules.photo.service", "PhotoService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, database, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config) -> None:
        """Initialize core with config, MongoDB, and auto-register services."""
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard")
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.services = Services(self.database)
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
        """Start all services on application startup."""
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        await self.mongo_client.aclose()
