"""Tests for the in-process key-value store."""

import pytest

from mt5platform.core.store import MemoryStore


class TestMemoryStore:
    """Basic get/set/delete semantics."""

    @pytest.mark.asyncio
    async def test_missing_key_is_none(self):
        """Test that reading an unknown key returns None."""
        assert await MemoryStore().get("nope") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self):
        store = MemoryStore()
        await store.set("k", "v")
        assert await store.get("k") == "v"

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self):
        """Test that deleting a missing key is not an error."""
        store = MemoryStore()
        await store.set("k", "v")
        await store.delete("k")
        await store.delete("k")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_list_keys_matches_glob(self):
        store = MemoryStore()
        await store.set("session:a", "1")
        await store.set("session:b", "2")
        await store.set("platform_users", "[]")

        assert sorted(await store.list_keys("session:*")) == ["session:a", "session:b"]
        assert len(await store.list_keys()) == 3


class TestMemoryStoreExpiry:
    """TTL handling."""

    @pytest.mark.asyncio
    async def test_zero_ttl_expires_immediately(self):
        """Test that a key written with a zero TTL is already gone."""
        store = MemoryStore()
        await store.set_with_expiry("k", "v", 0)
        assert await store.get("k") is None
        assert await store.list_keys() == []

    @pytest.mark.asyncio
    async def test_positive_ttl_is_readable(self):
        store = MemoryStore()
        await store.set_with_expiry("k", "v", 60)
        assert await store.get("k") == "v"
