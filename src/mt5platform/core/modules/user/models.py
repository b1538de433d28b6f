from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from mt5platform.core.db import StoredModel
from mt5platform.core.modules.access.models import Principal, Role
from mt5platform.utils import now

USERS_KEY = "platform_users"


class UserStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class User(StoredModel):
    """Platform user as stored in the `platform_users` blob."""

    username: str
    email: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    password: str  # bcrypt hash
    role: Role
    status: UserStatus = UserStatus.ACTIVE
    created_at: datetime = Field(default_factory=now)
    last_login: datetime | None = None
    updated_at: datetime | None = None

    def to_principal(self) -> Principal:
        return Principal(user_id=self.id, username=self.username, role=self.role)


class UserView(BaseModel):
    """User account information (API representation, no password)."""

    id: UUID = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    email: str = Field(..., description="Email address")
    first_name: str = Field(..., alias="firstName", description="First name")
    last_name: str = Field(..., alias="lastName", description="Last name")
    role: Role = Field(..., description="Platform role")
    status: UserStatus = Field(..., description="Account status")
    created_at: datetime = Field(..., description="Creation timestamp")
    last_login: datetime | None = Field(None, description="Last successful login")
    updated_at: datetime | None = Field(None, description="Last modification timestamp")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls.model_validate(user.model_dump(exclude={"password"}))


class UserUpdate(BaseModel):
    """Partial user update; None means leave unchanged."""

    username: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None
    status: str | None = None
    password: str | None = None
