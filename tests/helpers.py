"""Helpers for driving the store and the API from synchronous tests."""

import asyncio
from datetime import datetime

from fastapi.testclient import TestClient

from mt5platform.core.modules.access.models import Principal
from mt5platform.core.modules.session.models import Session, session_key
from mt5platform.core.store import KeyValueStore

ADMIN_PASSWORD = "admin123"


def write_session(store: KeyValueStore, token: str, principal: Principal, created_at: datetime, expires_at: datetime) -> None:
    """Store a session record as-is, bypassing SessionService (e.g. already expired)."""
    session = Session(
        user_id=principal.user_id,
        username=principal.username,
        role=principal.role,
        created_at=created_at,
        expires_at=expires_at,
    )
    asyncio.run(store.set(session_key(token), session.model_dump_json()))


def read_key(store: KeyValueStore, key: str) -> str | None:
    return asyncio.run(store.get(key))


def login(client: TestClient, username: str, password: str) -> dict[str, str]:
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['session_id']}"}
