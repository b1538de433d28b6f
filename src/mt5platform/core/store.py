"""Key-value store backends.

All persisted state lives behind the small `KeyValueStore` surface so that the
session and record services never talk to a driver directly.
"""

from __future__ import annotations

import fnmatch
import time
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from mt5platform.errors import StoreUnavailableError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def list_keys(self, pattern: str = "*") -> list[str]: ...

    async def ping(self) -> None: ...

    async def close(self) -> None: ...


class RedisStore:
    """Redis-backed store. Driver errors surface as StoreUnavailableError."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> RedisStore:
        return cls(redis.from_url(url, decode_responses=True))

    async def _call(self, operation: str, func: Callable[[], Awaitable[T]]) -> T:
        try:
            return await func()
        except RedisError as e:
            logger.error("store_operation_failed", operation=operation, error_class=type(e).__name__)
            raise StoreUnavailableError(operation) from e

    async def get(self, key: str) -> str | None:
        return await self._call("get", lambda: self._client.get(key))

    async def set(self, key: str, value: str) -> None:
        await self._call("set", lambda: self._client.set(key, value))

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._call("setex", lambda: self._client.setex(key, ttl_seconds, value))

    async def delete(self, key: str) -> None:
        await self._call("delete", lambda: self._client.delete(key))

    async def list_keys(self, pattern: str = "*") -> list[str]:
        return await self._call("keys", lambda: self._client.keys(pattern))

    async def ping(self) -> None:
        await self._call("ping", lambda: self._client.ping())

    async def close(self) -> None:
        await self._client.aclose()


class MemoryStore:
    """In-process store with Redis-like expiry, for development and tests."""

    def __init__(self) -> None:
        self._data: dict[str, tuple[str, float | None]] = {}

    def _live(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, deadline = entry
        if deadline is not None and time.monotonic() >= deadline:
            del self._data[key]
            return None
        return value

    async def get(self, key: str) -> str | None:
        return self._live(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = (value, None)

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        self._data[key] = (value, time.monotonic() + ttl_seconds)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def list_keys(self, pattern: str = "*") -> list[str]:
        return [key for key in list(self._data) if self._live(key) is not None and fnmatch.fnmatchcase(key, pattern)]

    async def ping(self) -> None:
        """Always reachable."""

    async def close(self) -> None:
        self._data.clear()
