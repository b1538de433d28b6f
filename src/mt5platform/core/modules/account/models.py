"""MT5 trading account records."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from mt5platform.core.db import StoredModel
from mt5platform.utils import now

ACCOUNTS_KEY = "mt5_accounts"


class Provider(StrEnum):
    FTMO = "ftmo"
    FOREX = "forex"
    XM = "xm"


class AccountType(StrEnum):
    CHALLENGE = "challenge"
    VERIFICATION = "verification"
    LIVE = "live"


class Account(StoredModel):
    """Trading account as stored in the `mt5_accounts` blob."""

    account_number: str
    password: str  # broker password, stored as given
    server: str
    base_balance: float = 0
    account_type: AccountType = AccountType.CHALLENGE
    provider: Provider
    status: str = "active"
    balance: float = 0
    equity: float = 0
    created_at: datetime = Field(default_factory=now)
    created_by: str
    updated_at: datetime | None = None
    updated_by: str | None = None


class AccountUpdate(BaseModel):
    """Partial account update; None means leave unchanged."""

    account_number: str | None = None
    password: str | None = None
    server: str | None = None
    base_balance: Any = None  # type-checked by validate_base_balance
    account_type: str | None = None
    provider: str | None = None
