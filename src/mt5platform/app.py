from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime
from uuid import UUID

from mt5platform import utils
from mt5platform.config import Config
from mt5platform.core.core import Core
from mt5platform.core.modules.access.models import Principal, Role, RoleGuard
from mt5platform.core.modules.account.models import Account, AccountUpdate
from mt5platform.core.modules.session.models import AuthenticatedSession, AuthToken
from mt5platform.core.modules.user.models import UserUpdate, UserView
from mt5platform.core.store import KeyValueStore


class App:
    """Facade for all application operations.

    Routes reach it only after the authentication and role-guard stages have run,
    so operations receive the already-resolved Principal.
    """

    def __init__(self, config: Config, store: KeyValueStore | None = None) -> None:
        self._core = Core(config, store)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Authentication pipeline ===
    async def authenticate(self, authorization: str | None) -> AuthenticatedSession:
        """Validate the Authorization header against the session store."""
        return await self._core.services.access.authenticate(authorization)

    def ensure_role(self, principal: Principal, guard: RoleGuard) -> None:
        self._core.services.access.ensure_role(principal, guard)

    def ensure_policy(self, principal: Principal, policy_name: str) -> None:
        self._core.services.access.ensure_policy(principal, policy_name)

    # === Auth ===
    async def login(self, username: str | None, password: str | None) -> tuple[UserView, AuthToken]:
        """Verify credentials, stamp last_login and open a session."""
        user = await self._core.services.user.verify_credentials(username, password)
        user = await self._core.services.user.record_login(user.id)
        auth_token = await self._core.services.session.create_session(user.to_principal())
        return UserView.from_domain(user), auth_token

    async def register(
        self, username: str | None, email: str | None, first_name: str | None, last_name: str | None, password: str | None
    ) -> tuple[UserView, AuthToken]:
        """Create a trader account and open a session for it."""
        user = await self._core.services.user.register_user(username, email, first_name, last_name, password)
        auth_token = await self._core.services.session.create_session(user.to_principal())
        return UserView.from_domain(user), auth_token

    async def logout(self, auth_token: AuthToken) -> None:
        await self._core.services.session.invalidate_session(auth_token)

    async def get_current_user(self, principal: Principal) -> UserView:
        """Live user record for the session's principal (404 if deleted since login)."""
        user = await self._core.services.user.get_user(principal.user_id)
        return UserView.from_domain(user)

    # === Users ===
    async def get_all_users(self) -> list[UserView]:
        users = await self._core.services.user.get_all_users()
        return [UserView.from_domain(user) for user in users]

    async def create_user(
        self,
        username: str | None,
        email: str | None,
        first_name: str | None,
        last_name: str | None,
        password: str | None,
        role: Role | str | None,
    ) -> UserView:
        user = await self._core.services.user.create_user(username, email, first_name, last_name, password, role)
        return UserView.from_domain(user)

    async def update_user(self, principal: Principal, user_id: UUID, update: UserUpdate) -> UserView:
        user = await self._core.services.user.update_user(user_id, update, principal.user_id)
        return UserView.from_domain(user)

    async def delete_user(self, principal: Principal, user_id: UUID) -> None:
        """Delete a user (cannot delete self)."""
        await self._core.services.user.delete_user(user_id, principal.user_id)

    # === Accounts ===
    async def get_all_accounts(self) -> list[Account]:
        return await self._core.services.account.get_all_accounts()

    async def create_account(
        self,
        principal: Principal,
        account_number: str | None,
        password: str | None,
        server: str | None,
        provider: str | None,
        base_balance: object = 0,
        account_type: str | None = None,
    ) -> Account:
        return await self._core.services.account.create_account(
            account_number, password, server, provider, principal.username, base_balance, account_type
        )

    async def update_account(self, principal: Principal, account_id: UUID, update: AccountUpdate) -> Account:
        return await self._core.services.account.update_account(account_id, update, principal.username)

    async def delete_account(self, account_id: UUID) -> None:
        await self._core.services.account.delete_account(account_id)

    # === Health ===
    async def check_store(self) -> datetime:
        """Ping the store; raises StoreUnavailableError when it cannot be reached."""
        await self._core.store.ping()
        return utils.now()
