from collections.abc import Callable, Coroutine, Iterable
from typing import Annotated, Any, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from mt5platform.app import App
from mt5platform.core.modules.access.models import Principal, Role, RoleGuard
from mt5platform.core.modules.session.models import AuthenticatedSession, AuthToken

# Raw header: the literal "Bearer " prefix check happens in AccessService.authenticate
authorization_scheme = APIKeyHeader(
    name="Authorization",
    scheme_name="BearerSession",
    description="Session token as 'Bearer <session_id>'",
    auto_error=False,
)

GuardDependency = Callable[..., Coroutine[Any, Any, Principal]]


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_authenticated_session(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    authorization: Annotated[str | None, Depends(authorization_scheme)] = None,
) -> AuthenticatedSession:
    """Authenticate the request and attach the principal to request.state.

    FastAPI caches this per request, so every route and guard shares one validation.
    """
    authenticated = await app.authenticate(authorization)
    request.state.principal = authenticated.principal
    request.state.auth_token = authenticated.auth_token
    return authenticated


async def get_principal(
    authenticated: Annotated[AuthenticatedSession, Depends(get_authenticated_session)],
) -> Principal:
    return authenticated.principal


async def get_auth_token(
    authenticated: Annotated[AuthenticatedSession, Depends(get_authenticated_session)],
) -> AuthToken:
    return AuthToken(authenticated.auth_token)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
PrincipalDep = Annotated[Principal, Depends(get_principal)]
AuthTokenDep = Annotated[AuthToken, Depends(get_auth_token)]


def role_guard(allowed_roles: Iterable[Role | str], message: str) -> GuardDependency:
    """Build a route stage that admits only principals whose role is on the allow-list."""
    guard = RoleGuard(allowed_roles=frozenset(Role(role) for role in allowed_roles), message=message)

    async def ensure_role(app: AppDep, principal: PrincipalDep) -> Principal:
        app.ensure_role(principal, guard)
        return principal

    return ensure_role


def require_policy(policy_name: str) -> GuardDependency:
    """Build a route stage from a named entry of the configured access policy."""

    async def ensure_policy(app: AppDep, principal: PrincipalDep) -> Principal:
        app.ensure_policy(principal, policy_name)
        return principal

    return ensure_policy


UserAdminDep = Annotated[Principal, Depends(require_policy("manage_users"))]
AccountManagerDep = Annotated[Principal, Depends(require_policy("manage_accounts"))]
