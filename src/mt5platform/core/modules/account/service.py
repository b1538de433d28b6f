from typing import Any
from uuid import UUID

import structlog

from mt5platform import utils
from mt5platform.core.core import Service
from mt5platform.core.modules.account.models import ACCOUNTS_KEY, Account, AccountType, AccountUpdate
from mt5platform.core.modules.account.validators import (
    validate_account_type,
    validate_base_balance,
    validate_provider,
)
from mt5platform.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class AccountService(Service):
    """Manages MT5 accounts stored as a single JSON list under `mt5_accounts`.

    Entries that fail validation (legacy records without a provider, for example) are
    skipped on read and written back untouched, so only `clean-accounts` removes them.
    """

    async def _load(self) -> tuple[list[Account], list[Any]]:
        accounts, unreadable = Account.partition_list(await self.store.get(ACCOUNTS_KEY))
        if unreadable:
            logger.warning("unreadable_accounts_skipped", count=len(unreadable))
        return accounts, unreadable

    async def _save(self, accounts: list[Account], unreadable: list[Any]) -> None:
        await self.store.set(ACCOUNTS_KEY, Account.dump_list(accounts, unreadable))

    async def get_all_accounts(self) -> list[Account]:
        accounts, _ = await self._load()
        return accounts

    async def create_account(
        self,
        account_number: str | None,
        password: str | None,
        server: str | None,
        provider: str | None,
        created_by: str,
        base_balance: object = 0,
        account_type: str | None = None,
    ) -> Account:
        if not account_number or not password or not server or not provider:
            raise ValidationError("Account number, password, server, and provider are required")

        account = Account(
            account_number=account_number,
            password=password,
            server=server,
            provider=validate_provider(provider),
            account_type=validate_account_type(account_type) if account_type else AccountType.CHALLENGE,
            base_balance=validate_base_balance(base_balance if base_balance is not None else 0),
            created_by=created_by,
        )

        accounts, unreadable = await self._load()
        if any(a.account_number == account_number for a in accounts):
            raise ValidationError("Account number already exists")

        accounts.append(account)
        await self._save(accounts, unreadable)
        logger.info("account_created", account_number=account_number, created_by=created_by)
        return account

    async def update_account(self, account_id: UUID, update: AccountUpdate, updated_by: str) -> Account:
        """Apply a partial update with the same validation rules as creation."""
        accounts, unreadable = await self._load()
        index = next((i for i, a in enumerate(accounts) if a.id == account_id), None)
        if index is None:
            raise NotFoundError("Account not found")

        changes: dict[str, object] = {}
        if update.provider:
            changes["provider"] = validate_provider(update.provider)
        if update.account_type:
            changes["account_type"] = validate_account_type(update.account_type)
        if update.base_balance is not None:
            changes["base_balance"] = validate_base_balance(update.base_balance)
        if update.account_number:
            if any(a.account_number == update.account_number and a.id != account_id for a in accounts):
                raise ValidationError("Account number already exists")
            changes["account_number"] = update.account_number
        if update.password:
            changes["password"] = update.password
        if update.server:
            changes["server"] = update.server

        changes["updated_at"] = utils.now()
        changes["updated_by"] = updated_by

        accounts[index] = accounts[index].model_copy(update=changes)
        await self._save(accounts, unreadable)
        return accounts[index]

    async def delete_account(self, account_id: UUID) -> None:
        accounts, unreadable = await self._load()
        remaining = [a for a in accounts if a.id != account_id]
        if len(remaining) == len(accounts):
            raise NotFoundError("Account not found")
        await self._save(remaining, unreadable)
        logger.info("account_deleted", account_id=str(account_id))
