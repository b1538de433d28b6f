"""Roles, principals and route guards."""

from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from mt5platform.errors import InsufficientRoleError


class Role(StrEnum):
    """Closed set of platform roles."""

    ADMIN = "admin"
    MANAGER = "manager"
    TRADER = "trader"
    VIEWER = "viewer"


class Principal(BaseModel):
    """Authenticated identity attached to a single request."""

    user_id: UUID
    username: str
    role: Role

    model_config = ConfigDict(frozen=True)


class RoleGuard(BaseModel):
    """Allow-list of roles permitted through one route stage."""

    allowed_roles: frozenset[Role]
    message: str = Field(..., description="Static 403 message, never names the caller's role")

    model_config = ConfigDict(frozen=True)

    def permits(self, role: Role) -> bool:
        return role in self.allowed_roles

    def ensure(self, principal: Principal) -> None:
        if not self.permits(principal.role):
            raise InsufficientRoleError(self.message)


class AccessPolicy(BaseModel):
    """Per-route guard table."""

    manage_users: RoleGuard
    manage_accounts: RoleGuard

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_roles(cls, user_admin_roles: frozenset[Role], account_manager_roles: frozenset[Role]) -> "AccessPolicy":
        return cls(
            manage_users=RoleGuard(allowed_roles=user_admin_roles, message="Admin access required"),
            manage_accounts=RoleGuard(allowed_roles=account_manager_roles, message="Manager or Admin access required"),
        )

    def guard(self, name: str) -> RoleGuard:
        if name not in type(self).model_fields:
            raise KeyError(f"Unknown access policy '{name}'")
        return getattr(self, name)  # type: ignore[no-any-return]
