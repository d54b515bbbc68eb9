"""The access truth table shared by the edge middleware and the page layer."""

from __future__ import annotations

from enum import Enum

from .routes import RouteClass


class GateDecision(str, Enum):
    ALLOW = "allow"
    REDIRECT_TO_LOGIN = "redirect_to_login"
    REDIRECT_TO_HOME = "redirect_to_home"


def decide(route_class: RouteClass, session_present: bool) -> GateDecision:
    if route_class is RouteClass.PROTECTED:
        return GateDecision.ALLOW if session_present else GateDecision.REDIRECT_TO_LOGIN
    if route_class is RouteClass.AUTH_ONLY:
        return GateDecision.REDIRECT_TO_HOME if session_present else GateDecision.ALLOW
    return GateDecision.ALLOW
