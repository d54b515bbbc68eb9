from __future__ import annotations

from .context import AuthContext, get_auth_context, get_identity, lookup_session
from .gate import GateDecision, decide
from .routes import RouteClass, RouteClassifier
from .session import LookupOutcome, Session, SessionCredentials, SessionLookup, SessionVerifier

__all__ = [
    "AuthContext",
    "GateDecision",
    "LookupOutcome",
    "RouteClass",
    "RouteClassifier",
    "Session",
    "SessionCredentials",
    "SessionLookup",
    "SessionVerifier",
    "decide",
    "get_auth_context",
    "get_identity",
    "lookup_session",
]
