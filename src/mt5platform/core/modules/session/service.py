from datetime import timedelta
from uuid import uuid4

import structlog
from pydantic import ValidationError as PydanticValidationError

from mt5platform import utils
from mt5platform.core.core import Service
from mt5platform.core.modules.access.models import Principal
from mt5platform.core.modules.session.models import (
    AuthToken,
    InvalidSession,
    InvalidSessionKind,
    Session,
    session_key,
)

logger = structlog.get_logger(__name__)


def is_well_formed_token(auth_token: str) -> bool:
    """Tokens are canonical UUID strings; anything else is never looked up."""
    return bool(auth_token) and utils.is_uuid_string(auth_token)


class SessionService(Service):
    """Owns the lifecycle of session records.

    Expiry is lazy: a session past `expires_at` is deleted the first time it is
    presented, never by a background sweep. The store-level TTL is only a hint.
    """

    @property
    def ttl_seconds(self) -> int:
        return self.core.config.session_ttl_seconds

    async def create_session(self, principal: Principal) -> AuthToken:
        auth_token = AuthToken(str(uuid4()))
        created_at = utils.now()
        session = Session(
            user_id=principal.user_id,
            username=principal.username,
            role=principal.role,
            created_at=created_at,
            expires_at=created_at + timedelta(seconds=self.ttl_seconds),
        )
        await self.store.set_with_expiry(session_key(auth_token), session.model_dump_json(), self.ttl_seconds)
        logger.debug("session_created", user_id=str(principal.user_id), role=principal.role)
        return auth_token

    async def get_session(self, auth_token: str) -> Session | None:
        """Raw read. Does not check expiry; use validate_and_get for authentication."""
        raw = await self.store.get(session_key(auth_token))
        if raw is None:
            return None
        return Session.model_validate_json(raw)

    async def validate_and_get(self, auth_token: str) -> Session | InvalidSession:
        if not is_well_formed_token(auth_token):
            return InvalidSession(kind=InvalidSessionKind.MALFORMED)

        try:
            session = await self.get_session(auth_token)
        except PydanticValidationError:
            # Unknown role or garbled record: never let it through authorization
            logger.warning("session_record_unreadable", key=session_key(auth_token))
            return InvalidSession(kind=InvalidSessionKind.MALFORMED)

        if session is None:
            return InvalidSession(kind=InvalidSessionKind.NO_SUCH_SESSION)

        if session.is_expired(utils.now()):
            await self.invalidate_session(auth_token)
            return InvalidSession(kind=InvalidSessionKind.EXPIRED)

        return session

    async def invalidate_session(self, auth_token: str) -> None:
        await self.store.delete(session_key(auth_token))
