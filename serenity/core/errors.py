from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A data-layer failure; ``message`` is safe to show to clients."""

    def __init__(self, message: str = "Something went wrong") -> None:
        super().__init__(message)
        self.message = message


class ResourceNotFound(Exception):
    def __init__(self, resource: str, resource_id: Any) -> None:
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id

    @property
    def message(self) -> str:
        return f"{self.resource.capitalize()} not found"


class LoginRequired(Exception):
    """Raised by page dependencies when the page-level gate does not allow."""


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


def _wants_json(request: Request) -> bool:
    return request.url.path.startswith("/api")


def _render(request: Request, template: str, context: dict[str, Any], status_code: int):
    templates = request.app.state.templates
    return templates.TemplateResponse(request, template, context, status_code=status_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        accept = (request.headers.get("accept") or "").lower()
        login_path = request.app.state.settings.LOGIN_PATH
        if "text/html" in accept and not _wants_json(request) and not request.url.path.startswith(login_path):
            return RedirectResponse(url=login_path, status_code=302)
    detail = exc.detail
    if isinstance(detail, str):
        message = detail
    else:
        try:
            message = HTTPStatus(exc.status_code).phrase
        except ValueError:
            message = "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code="http_error",
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorEnvelope(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code="validation_error",
        message="Validation failed",
        details={"errors": exc.errors()},
    )


async def backend_error_handler(request: Request, exc: BackendError):
    # Full detail was logged where the error was raised.
    if _wants_json(request):
        return ErrorEnvelope(status_code=500, code="backend_error", message=exc.message)
    return _render(request, "error.html", {"message": exc.message}, status_code=500)


async def not_found_handler(request: Request, exc: ResourceNotFound):
    if _wants_json(request):
        return ErrorEnvelope(status_code=404, code="not_found", message=exc.message)
    return _render(request, "not_found.html", {"message": exc.message}, status_code=404)


async def login_required_handler(request: Request, exc: LoginRequired):
    return _render(
        request,
        "login.html",
        {"error": "", "email": "", "inline": True},
        status_code=status.HTTP_401_UNAUTHORIZED,
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return ErrorEnvelope(status_code=500, code="internal_error", message="Internal error")


def register_exception_handlers(app) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(BackendError, backend_error_handler)
    app.add_exception_handler(ResourceNotFound, not_found_handler)
    app.add_exception_handler(LoginRequired, login_required_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
