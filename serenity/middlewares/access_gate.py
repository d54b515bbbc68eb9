from __future__ import annotations

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from ..access.context import lookup_session
from ..access.gate import GateDecision, decide
from ..access.routes import RouteClass, RouteClassifier

logger = logging.getLogger("serenity.gate")


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Redirect before routing based on the path's class and the session.

    Must sit inside the session middleware so the signed cookie is decoded.
    """

    def __init__(  # type: ignore[override]
        self,
        app,
        classifier: RouteClassifier,
        login_path: str = "/login",
        home_path: str = "/dashboard",
    ) -> None:
        super().__init__(app)
        self.classifier = classifier
        self.login_path = login_path
        self.home_path = home_path

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if self.classifier.is_exempt(path):
            return await call_next(request)
        route_class = self.classifier.classify(path)
        if route_class is RouteClass.PUBLIC:
            return await call_next(request)

        lookup = await lookup_session(request)
        decision = decide(route_class, lookup.has_session)
        if decision is GateDecision.ALLOW:
            return await call_next(request)

        target = self.login_path if decision is GateDecision.REDIRECT_TO_LOGIN else self.home_path
        logger.info(
            "gate.redirect",
            extra={
                "extra_data": {
                    "path": path,
                    "route_class": route_class.value,
                    "outcome": lookup.outcome.value,
                    "location": target,
                }
            },
        )
        return RedirectResponse(url=target, status_code=302)
