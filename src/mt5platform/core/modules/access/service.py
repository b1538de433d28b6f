import structlog

from mt5platform.core.core import Service
from mt5platform.core.modules.access.models import AccessPolicy, Principal, RoleGuard
from mt5platform.core.modules.session.models import AuthenticatedSession, InvalidSession, InvalidSessionKind
from mt5platform.errors import InvalidSessionError, NoSessionProvidedError, SessionExpiredError

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "Bearer "


class AccessService(Service):
    """Authentication of bearer sessions and role checks against the route policy."""

    _policy: AccessPolicy | None = None

    @property
    def policy(self) -> AccessPolicy:
        if self._policy is None:
            config = self.core.config
            self._policy = AccessPolicy.from_roles(config.user_admin_roles, config.account_manager_roles)
        return self._policy

    async def authenticate(self, authorization: str | None) -> AuthenticatedSession:
        """Resolve an Authorization header value to the session's principal.

        Performs at most one store read, plus one delete when the session has expired.
        """
        if authorization is None or not authorization.startswith(BEARER_PREFIX):
            logger.debug("session_rejected", reason="no_session_provided")
            raise NoSessionProvidedError

        auth_token = authorization[len(BEARER_PREFIX) :]
        result = await self.core.services.session.validate_and_get(auth_token)

        if isinstance(result, InvalidSession):
            logger.debug("session_rejected", reason=result.kind)
            if result.kind == InvalidSessionKind.EXPIRED:
                raise SessionExpiredError
            raise InvalidSessionError

        return AuthenticatedSession(auth_token=auth_token, principal=result.to_principal())

    def ensure_role(self, principal: Principal, guard: RoleGuard) -> None:
        """Raise InsufficientRoleError unless the principal's role is on the guard's allow-list."""
        if not guard.permits(principal.role):
            logger.debug("role_rejected", username=principal.username, message=guard.message)
        guard.ensure(principal)

    def ensure_policy(self, principal: Principal, name: str) -> None:
        self.ensure_role(principal, self.policy.guard(name))
