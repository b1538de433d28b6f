"""Session records and validation outcomes."""

from datetime import datetime
from enum import StrEnum
from typing import NewType
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from mt5platform.core.modules.access.models import Principal, Role

AuthToken = NewType("AuthToken", str)

SESSION_KEY_PREFIX = "session:"


def session_key(auth_token: str) -> str:
    return f"{SESSION_KEY_PREFIX}{auth_token}"


class Session(BaseModel):
    """Identity snapshot bound to a token, stored at `session:<token>`.

    The snapshot is taken at login and is not joined back to the user record.
    """

    user_id: UUID
    username: str
    role: Role
    created_at: datetime
    expires_at: datetime

    model_config = ConfigDict(frozen=True)

    def is_expired(self, at: datetime) -> bool:
        return at > self.expires_at

    def to_principal(self) -> Principal:
        return Principal(user_id=self.user_id, username=self.username, role=self.role)


class InvalidSessionKind(StrEnum):
    MALFORMED = "malformed"
    NO_SUCH_SESSION = "no_such_session"
    EXPIRED = "expired"


class InvalidSession(BaseModel):
    kind: InvalidSessionKind

    model_config = ConfigDict(frozen=True)


class AuthenticatedSession(BaseModel):
    """Result of authenticating a request: the token and who it belongs to."""

    auth_token: str
    principal: Principal

    model_config = ConfigDict(frozen=True)
