from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import cast

from mt5platform.config import Config
from mt5platform.core.store import KeyValueStore, MemoryStore, RedisStore


class Service:
    """Base class for services with direct key-value store access."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
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

    from mt5platform.core.modules.access.service import AccessService  # noqa: PLC0415
    from mt5platform.core.modules.account.service import AccountService  # noqa: PLC0415
    from mt5platform.core.modules.session.service import SessionService  # noqa: PLC0415
    from mt5platform.core.modules.user.service import UserService  # noqa: PLC0415

    user: UserService
    session: SessionService
    access: AccessService
    account: AccountService

    def __init__(self, store: KeyValueStore) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._store = store

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters for startup - users are seeded before anything else runs
        service_configs = [
            ("user", "mt5platform.core.modules.user.service", "UserService"),
            ("session", "mt5platform.core.modules.session.service", "SessionService"),
            ("access", "mt5platform.core.modules.access.service", "AccessService"),
            ("account", "mt5platform.core.modules.account.service", "AccountService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(store)
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


def create_store(config: Config) -> KeyValueStore:
    if config.store_backend == "memory":
        return MemoryStore()
    return RedisStore.from_url(config.redis_url)


class Core:
    """Container providing config, the key-value store, and all service instances."""

    config: Config
    store: KeyValueStore
    services: Services

    def __init__(self, config: Config, store: KeyValueStore | None = None) -> None:
        """Initialize core with config, a store, and auto-register services."""
        self.config = config
        self.store = store if store is not None else create_store(config)
        self.services = Services(self.store)
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
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close the store connection on shutdown."""
        await self.services.stop_all()
        await self.store.close()
