from __future__ import annotations

from .access_gate import AccessGateMiddleware
from .request_id import RequestIdMiddleware, principal_of, request_id_ctx_var
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "AccessGateMiddleware",
    "RequestIdMiddleware",
    "SecurityHeadersMiddleware",
    "principal_of",
    "request_id_ctx_var",
]
