"""Session descriptors and the verifier that produces them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from starlette.requests import Request

from ..core.security import peek_expiry
from ..services.identity import AuthTokens, IdentityError, IdentityService, User

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "sb_access_token"


@dataclass(frozen=True)
class Session:
    user: User
    access_token: str = field(repr=False)
    expires_at: datetime | None = None

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and self.expires_at <= datetime.now(timezone.utc)


class LookupOutcome(str, Enum):
    AUTHENTICATED = "authenticated"
    NO_SESSION = "no_session"
    VERIFICATION_FAILED = "verification_failed"


@dataclass(frozen=True)
class SessionLookup:
    outcome: LookupOutcome
    session: Session | None = None
    error: Exception | None = None

    @classmethod
    def authenticated(cls, session: Session) -> "SessionLookup":
        return cls(LookupOutcome.AUTHENTICATED, session=session)

    @classmethod
    def no_session(cls) -> "SessionLookup":
        return cls(LookupOutcome.NO_SESSION)

    @classmethod
    def failed(cls, error: Exception) -> "SessionLookup":
        return cls(LookupOutcome.VERIFICATION_FAILED, error=error)

    @property
    def has_session(self) -> bool:
        # A failed verification counts as "no session" (fail closed).
        return self.outcome is LookupOutcome.AUTHENTICATED and self.session is not None


@dataclass(frozen=True)
class SessionCredentials:
    access_token: str | None = field(default=None, repr=False)

    @classmethod
    def from_request(cls, request: Request) -> "SessionCredentials":
        if "session" not in request.scope:
            return cls()
        return cls(access_token=request.session.get(ACCESS_TOKEN_KEY) or None)


def store_tokens(request: Request, tokens: AuthTokens) -> None:
    request.session[ACCESS_TOKEN_KEY] = tokens.access_token


def clear_tokens(request: Request) -> None:
    request.session.clear()


class SessionVerifier:
    """Turn request credentials into a :class:`SessionLookup`.

    ``identity_provider`` is called lazily so requests without a token never
    build an identity client. Nothing raised by the identity service escapes:
    rejections become ``NO_SESSION`` and outages become
    ``VERIFICATION_FAILED``.
    """

    def __init__(self, identity_provider: Callable[[], IdentityService]) -> None:
        self.identity_provider = identity_provider

    def current_session(self, credentials: SessionCredentials | None) -> SessionLookup:
        token = credentials.access_token if credentials else None
        if not token:
            return SessionLookup.no_session()
        try:
            user = self.identity_provider().get_user(token)
        except IdentityError as exc:
            logger.warning(
                "session.verification_failed",
                extra={"extra_data": {"error": str(exc), "cause": repr(exc.__cause__)}},
            )
            return SessionLookup.failed(exc)
        if user is None:
            return SessionLookup.no_session()
        session = Session(user=user, access_token=token, expires_at=peek_expiry(token))
        if session.expired:
            return SessionLookup.no_session()
        return SessionLookup.authenticated(session)
