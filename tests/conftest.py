"""Shared pytest fixtures."""

import asyncio
from collections.abc import Callable, Iterator
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from helpers import ADMIN_PASSWORD
from mt5platform.app import App
from mt5platform.config import Config
from mt5platform.core.core import Core
from mt5platform.core.modules.access.models import Principal, Role
from mt5platform.core.store import MemoryStore
from mt5platform.web.server import create_fastapi_app


@pytest.fixture
def config() -> Config:
    """In-memory configuration with cheap password hashing."""
    return Config(_env_file=None, store_backend="memory", bcrypt_rounds=4, default_admin_password=ADMIN_PASSWORD)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def core(config, store) -> Core:
    """Core sharing the same store as the HTTP client fixture."""
    return Core(config, store)


@pytest.fixture
def client(config, store) -> Iterator[TestClient]:
    """HTTP client; entering it runs startup, which seeds the default admin."""
    fastapi_app = create_fastapi_app(App(config, store), config)
    with TestClient(fastapi_app) as test_client:
        yield test_client


@pytest.fixture
def principal_factory() -> Callable[..., Principal]:
    def make(role: Role | str = Role.VIEWER, username: str | None = None, user_id: UUID | None = None) -> Principal:
        role = Role(role)
        return Principal(user_id=user_id or uuid4(), username=username or f"{role}-user", role=role)

    return make


@pytest.fixture
def auth_headers(core, principal_factory) -> Callable[..., dict[str, str]]:
    """Open a session for a role directly through SessionService and return request headers."""

    def make(role: Role | str = Role.VIEWER, **kwargs: object) -> dict[str, str]:
        principal = principal_factory(role, **kwargs)
        token = asyncio.run(core.services.session.create_session(principal))
        return {"Authorization": f"Bearer {token}"}

    return make
