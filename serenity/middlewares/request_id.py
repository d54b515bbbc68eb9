"""Correlation ids and the per-request access log line."""

from __future__ import annotations

import logging
import time
from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)
logger = logging.getLogger("serenity.request")

# Request ids longer than this from a client are replaced.
MAX_REQUEST_ID_LENGTH = 128


def principal_of(request: Request) -> str | None:
    """Id of the signed-in user, once the session lookup has run for this request."""

    return getattr(request.state, "principal", None)


class RequestIdMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, header_name: str = "X-Request-ID") -> None:  # type: ignore[override]
        super().__init__(app)
        self.header_name = header_name

    def _request_id(self, request: Request) -> str:
        incoming = (request.headers.get(self.header_name) or "").strip()
        if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
            return incoming
        return uuid4().hex

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = self._request_id(request)
        request.state.request_id = request_id
        reset_token = request_id_ctx_var.set(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            response.headers[self.header_name] = request_id
            response.headers.setdefault("X-Response-Time", f"{elapsed_ms:.2f}ms")
            fields = {
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": elapsed_ms,
            }
            principal = principal_of(request)
            if principal:
                fields["principal"] = principal
            logger.info("request.completed", extra={"extra_data": fields})
        finally:
            request_id_ctx_var.reset(reset_token)
        return response
