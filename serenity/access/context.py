"""Request-scoped memo of the session lookup."""

from __future__ import annotations

import asyncio

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from ..services.identity import IdentityService
from .session import Session, SessionCredentials, SessionLookup, SessionVerifier

AUTH_CONTEXT_STATE_KEY = "auth_context"
IDENTITY_STATE_KEY = "identity"


class AuthContext:
    """Looks the session up at most once for the lifetime of one request."""

    def __init__(self, verifier: SessionVerifier, credentials: SessionCredentials) -> None:
        self.verifier = verifier
        self.credentials = credentials
        self._lookup: SessionLookup | None = None
        self._lock = asyncio.Lock()

    async def lookup(self) -> SessionLookup:
        if self._lookup is None:
            async with self._lock:
                if self._lookup is None:
                    self._lookup = await run_in_threadpool(self.verifier.current_session, self.credentials)
        return self._lookup

    async def session(self) -> Session | None:
        lookup = await self.lookup()
        return lookup.session if lookup.has_session else None

    def forget(self) -> None:
        """Mark the request as signed out (used after sign-out)."""

        self._lookup = SessionLookup.no_session()


def get_identity(request: Request) -> IdentityService:
    """Per-request identity client built from the app's injected factory."""

    identity = getattr(request.state, IDENTITY_STATE_KEY, None)
    if identity is None:
        identity = request.app.state.identity_factory()
        setattr(request.state, IDENTITY_STATE_KEY, identity)
    return identity


def get_auth_context(request: Request) -> AuthContext:
    context = getattr(request.state, AUTH_CONTEXT_STATE_KEY, None)
    if context is None:
        verifier = SessionVerifier(lambda: get_identity(request))
        context = AuthContext(verifier, SessionCredentials.from_request(request))
        setattr(request.state, AUTH_CONTEXT_STATE_KEY, context)
    return context


async def lookup_session(request: Request) -> SessionLookup:
    lookup = await get_auth_context(request).lookup()
    if lookup.has_session:
        request.state.principal = lookup.session.user.id
    return lookup
