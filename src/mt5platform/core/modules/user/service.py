from uuid import UUID

import bcrypt
import structlog

from mt5platform import utils
from mt5platform.core.core import Service
from mt5platform.core.modules.access.models import Role
from mt5platform.core.modules.user.models import USERS_KEY, User, UserStatus, UserUpdate
from mt5platform.core.modules.user.validators import validate_password, validate_role, validate_status
from mt5platform.errors import AuthenticationError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Manages users stored as a single JSON list under `platform_users`.

    The blob is read and written wholesale on every operation; there is no
    in-process cache.
    """

    async def _load(self) -> list[User]:
        return User.load_list(await self.store.get(USERS_KEY))

    async def _save(self, users: list[User]) -> None:
        await self.store.set(USERS_KEY, User.dump_list(users))

    def _hash_password(self, password: str) -> str:
        validate_password(password)
        salt = bcrypt.gensalt(rounds=self.core.config.bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    async def get_all_users(self) -> list[User]:
        return await self._load()

    async def get_user(self, user_id: UUID) -> User:
        user = next((u for u in await self._load() if u.id == user_id), None)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def create_user(
        self,
        username: str | None,
        email: str | None,
        first_name: str | None,
        last_name: str | None,
        password: str | None,
        role: Role | str | None,
    ) -> User:
        """Create user with hashed password. Username and email must be unique."""
        if not username or not email or not first_name or not last_name or not password or not role:
            raise ValidationError("All fields are required")
        role = validate_role(role)
        users = await self._load()
        if any(u.username == username for u in users):
            raise ValidationError("Username already exists")
        if any(u.email == email for u in users):
            raise ValidationError("Email already exists")

        user = User(
            username=username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            password=self._hash_password(password),
            role=role,
        )
        users.append(user)
        await self._save(users)
        logger.info("user_created", username=username, role=role)
        return user

    async def register_user(
        self, username: str | None, email: str | None, first_name: str | None, last_name: str | None, password: str | None
    ) -> User:
        """Self-service registration, always as an active trader."""
        user = await self.create_user(username, email, first_name, last_name, password, Role.TRADER)
        return await self.record_login(user.id)

    async def verify_credentials(self, username: str | None, password: str | None) -> User:
        """Check username and password, raising AuthenticationError on any mismatch."""
        if not username or not password:
            raise ValidationError("Username and password are required")
        user = next((u for u in await self._load() if u.username == username), None)
        if user is None or not bcrypt.checkpw(password.encode("utf-8"), user.password.encode("utf-8")):
            raise AuthenticationError("Invalid credentials")
        if user.status != UserStatus.ACTIVE:
            raise AuthenticationError("Account is disabled")
        return user

    async def record_login(self, user_id: UUID) -> User:
        users = await self._load()
        for i, user in enumerate(users):
            if user.id == user_id:
                users[i] = user.model_copy(update={"last_login": utils.now()})
                await self._save(users)
                return users[i]
        raise NotFoundError("User not found")

    async def update_user(self, user_id: UUID, update: UserUpdate, current_user_id: UUID) -> User:
        """Apply a partial update. Admins cannot deactivate themselves."""
        users = await self._load()
        index = next((i for i, u in enumerate(users) if u.id == user_id), None)
        if index is None:
            raise NotFoundError("User not found")

        role = validate_role(update.role) if update.role else None
        status = validate_status(update.status) if update.status else None

        if user_id == current_user_id and status == UserStatus.INACTIVE:
            raise ValidationError("You cannot deactivate your own account")
        if update.username and any(u.username == update.username and u.id != user_id for u in users):
            raise ValidationError("Username already exists")
        if update.email and any(u.email == update.email and u.id != user_id for u in users):
            raise ValidationError("Email already exists")

        # Blank values leave the field unchanged
        changes = {k: v for k, v in update.model_dump(exclude={"password", "role", "status"}).items() if v not in (None, "")}
        if role is not None:
            changes["role"] = role
        if status is not None:
            changes["status"] = status
        if update.password:
            changes["password"] = self._hash_password(update.password)
        changes["updated_at"] = utils.now()

        users[index] = users[index].model_copy(update=changes)
        await self._save(users)
        return users[index]

    async def delete_user(self, user_id: UUID, current_user_id: UUID) -> None:
        if user_id == current_user_id:
            raise ValidationError("You cannot delete your own account")

        users = await self._load()
        remaining = [u for u in users if u.id != user_id]
        if len(remaining) == len(users):
            raise NotFoundError("User not found")

        await self._save(remaining)
        logger.info("user_deleted", user_id=str(user_id))

    async def ensure_admin_user_exists(self) -> None:
        """Seed the default admin when the users blob has never been written."""
        if await self.store.get(USERS_KEY) is not None:
            return
        config = self.core.config
        await self.create_user(
            config.default_admin_username,
            config.default_admin_email,
            "System",
            "Administrator",
            config.default_admin_password,
            Role.ADMIN,
        )
        logger.info("default_admin_created", username=config.default_admin_username)

    async def on_start(self) -> None:
        await self.ensure_admin_user_exists()
        logger.debug("user_service_started")
