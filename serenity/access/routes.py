"""Map request paths onto access policy classes."""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class RouteClass(str, Enum):
    PROTECTED = "protected"
    AUTH_ONLY = "auth_only"
    PUBLIC = "public"


def _normalise(prefixes: Iterable[str]) -> tuple[str, ...]:
    cleaned = []
    for prefix in prefixes:
        prefix = (prefix or "").strip()
        if not prefix:
            continue
        if not prefix.startswith("/"):
            prefix = "/" + prefix
        cleaned.append(prefix)
    return tuple(cleaned)


class RouteClassifier:
    """Classify paths by prefix.

    Protected prefixes win over auth-only ones when both match, so a
    misconfiguration can only make a path stricter.
    """

    def __init__(self, protected: Iterable[str], auth_only: Iterable[str], exempt: Iterable[str] = ()) -> None:
        self.protected = _normalise(protected)
        self.auth_only = _normalise(auth_only)
        self.exempt = _normalise(exempt)

    @classmethod
    def from_settings(cls, settings) -> "RouteClassifier":
        return cls(
            protected=settings.PROTECTED_PREFIXES,
            auth_only=settings.AUTH_ONLY_PREFIXES,
            exempt=settings.GATE_EXEMPT_PREFIXES,
        )

    def classify(self, path: str) -> RouteClass:
        path = path or "/"
        if path.startswith(self.protected):
            return RouteClass.PROTECTED
        if path.startswith(self.auth_only):
            return RouteClass.AUTH_ONLY
        return RouteClass.PUBLIC

    def is_exempt(self, path: str) -> bool:
        """Paths the edge gate never looks at (assets, APIs, probes)."""

        return bool(self.exempt) and (path or "/").startswith(self.exempt)
