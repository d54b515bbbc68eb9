"""FastAPI dependencies for the page-level and API-level session checks."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from ..access.context import lookup_session
from ..access.gate import GateDecision, decide
from ..access.routes import RouteClass
from ..access.session import Session
from ..core.errors import LoginRequired


async def require_page_session(request: Request) -> Session:
    """Second enforcement point for protected pages.

    Runs even when the edge gate already allowed the request; the lookup is
    memoized so this costs nothing extra.
    """

    lookup = await lookup_session(request)
    if decide(RouteClass.PROTECTED, lookup.has_session) is not GateDecision.ALLOW:
        raise LoginRequired()
    return lookup.session


async def require_api_session(request: Request) -> Session:
    lookup = await lookup_session(request)
    if decide(RouteClass.PROTECTED, lookup.has_session) is not GateDecision.ALLOW:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return lookup.session


async def auth_page_decision(request: Request) -> GateDecision:
    """Decision for the sign-in and sign-up pages."""

    lookup = await lookup_session(request)
    return decide(RouteClass.AUTH_ONLY, lookup.has_session)
