"""Tests for user storage, credentials and admin operations."""

import json
from uuid import uuid4

import bcrypt
import pytest

from mt5platform.core.modules.access.models import Role
from mt5platform.core.modules.user.models import USERS_KEY, UserStatus, UserUpdate
from mt5platform.errors import AuthenticationError, NotFoundError, ValidationError


async def make_user(core, username="alice", email=None, password="secret", role=Role.TRADER):
    return await core.services.user.create_user(username, email or f"{username}@example.com", "Alice", "Smith", password, role)


class TestCreateUser:
    """Tests for UserService.create_user."""

    @pytest.mark.asyncio
    async def test_blob_uses_wire_field_names(self, core, store):
        """Test that users are stored as a JSON list with camelCase name fields and a bcrypt hash."""
        user = await make_user(core)

        stored = json.loads(await store.get(USERS_KEY))
        assert len(stored) == 1
        assert stored[0]["id"] == str(user.id)
        assert stored[0]["firstName"] == "Alice"
        assert stored[0]["lastName"] == "Smith"
        assert stored[0]["status"] == "active"
        assert bcrypt.checkpw(b"secret", stored[0]["password"].encode("utf-8"))

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, core):
        await make_user(core)
        with pytest.raises(ValidationError, match="Username already exists"):
            await make_user(core, email="other@example.com")

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, core):
        await make_user(core)
        with pytest.raises(ValidationError, match="Email already exists"):
            await make_user(core, username="bob", email="alice@example.com")

    @pytest.mark.asyncio
    async def test_blank_field_rejected_before_role_check(self, core, store):
        """Test that any empty field fails with the combined message and writes nothing."""
        with pytest.raises(ValidationError, match="All fields are required"):
            await core.services.user.create_user("bob", "bob@example.com", "", "B", "pw", "not-a-role")
        assert await store.get(USERS_KEY) is None

    @pytest.mark.asyncio
    async def test_register_is_trader_with_last_login(self, core):
        user = await core.services.user.register_user("tom", "tom@example.com", "Tom", "T", "pw")
        assert user.role == Role.TRADER
        assert user.last_login is not None


class TestVerifyCredentials:
    """Tests for UserService.verify_credentials."""

    @pytest.mark.asyncio
    async def test_valid_credentials(self, core):
        created = await make_user(core)
        user = await core.services.user.verify_credentials("alice", "secret")
        assert user.id == created.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_the_same(self, core):
        await make_user(core)
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await core.services.user.verify_credentials("alice", "wrong")
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await core.services.user.verify_credentials("nobody", "secret")

    @pytest.mark.asyncio
    async def test_missing_username_or_password(self, core):
        with pytest.raises(ValidationError, match="Username and password are required"):
            await core.services.user.verify_credentials("alice", None)
        with pytest.raises(ValidationError, match="Username and password are required"):
            await core.services.user.verify_credentials("", "secret")

    @pytest.mark.asyncio
    async def test_inactive_user_rejected(self, core):
        user = await make_user(core)
        await core.services.user.update_user(user.id, UserUpdate(status=UserStatus.INACTIVE), uuid4())

        with pytest.raises(AuthenticationError, match="Account is disabled"):
            await core.services.user.verify_credentials("alice", "secret")


class TestUpdateUser:
    """Tests for UserService.update_user."""

    @pytest.mark.asyncio
    async def test_partial_update(self, core):
        user = await make_user(core)

        updated = await core.services.user.update_user(user.id, UserUpdate(role=Role.VIEWER, first_name=""), uuid4())

        assert updated.role == Role.VIEWER
        assert updated.first_name == "Alice"
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_password_is_rehashed(self, core):
        user = await make_user(core)
        await core.services.user.update_user(user.id, UserUpdate(password="new-secret"), uuid4())

        await core.services.user.verify_credentials("alice", "new-secret")

    @pytest.mark.asyncio
    async def test_cannot_deactivate_self(self, core):
        user = await make_user(core)
        with pytest.raises(ValidationError, match="cannot deactivate your own account"):
            await core.services.user.update_user(user.id, UserUpdate(status=UserStatus.INACTIVE), user.id)

    @pytest.mark.asyncio
    async def test_username_clash_excludes_target(self, core):
        alice = await make_user(core)
        await make_user(core, username="bob")

        await core.services.user.update_user(alice.id, UserUpdate(username="alice"), uuid4())
        with pytest.raises(ValidationError, match="Username already exists"):
            await core.services.user.update_user(alice.id, UserUpdate(username="bob"), uuid4())

    @pytest.mark.asyncio
    async def test_unknown_user(self, core):
        with pytest.raises(NotFoundError):
            await core.services.user.update_user(uuid4(), UserUpdate(role=Role.ADMIN), uuid4())


class TestDeleteUser:
    """Tests for UserService.delete_user."""

    @pytest.mark.asyncio
    async def test_delete(self, core):
        user = await make_user(core)
        await core.services.user.delete_user(user.id, uuid4())
        assert await core.services.user.get_all_users() == []

    @pytest.mark.asyncio
    async def test_cannot_delete_self(self, core):
        user = await make_user(core)
        with pytest.raises(ValidationError, match="cannot delete your own account"):
            await core.services.user.delete_user(user.id, user.id)

    @pytest.mark.asyncio
    async def test_unknown_user(self, core):
        with pytest.raises(NotFoundError, match="User not found"):
            await core.services.user.delete_user(uuid4(), uuid4())


class TestDefaultAdmin:
    """Tests for startup seeding."""

    @pytest.mark.asyncio
    async def test_seeded_when_blob_absent(self, core):
        await core.services.user.ensure_admin_user_exists()

        admin = await core.services.user.verify_credentials("admin", "admin123")
        assert admin.role == Role.ADMIN

    @pytest.mark.asyncio
    async def test_not_seeded_over_existing_blob(self, core, store):
        await store.set(USERS_KEY, "[]")
        await core.services.user.ensure_admin_user_exists()
        assert await core.services.user.get_all_users() == []
