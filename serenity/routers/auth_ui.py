"""Sign-in, sign-up and sign-out for browser users."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from ..access.context import get_auth_context, get_identity
from ..access.gate import GateDecision
from ..access.session import SessionCredentials, clear_tokens, store_tokens
from ..deps.auth import auth_page_decision
from ..services.identity import IdentityError, InvalidCredentials

logger = logging.getLogger(__name__)
router = APIRouter()

SIGNOUT_HEADERS = {
    "Clear-Site-Data": '"cache", "storage", "executionContexts"',
    "Cache-Control": "no-store, max-age=0",
}


def _safe_next(next_url: str | None, default: str) -> str:
    # Only same-site relative paths; "//host" would be an open redirect.
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return default


def _render_form(request: Request, template: str, *, error: str = "", email: str = "", next_url: str = "", status_code: int = 200):
    templates = request.app.state.templates
    context = {"error": error, "email": email, "next": next_url, "inline": False}
    return templates.TemplateResponse(request, template, context, status_code=status_code)


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, next: str = "", decision: GateDecision = Depends(auth_page_decision)):
    if decision is GateDecision.REDIRECT_TO_HOME:
        return RedirectResponse(url=request.app.state.settings.HOME_PATH, status_code=302)
    return _render_form(request, "login.html", next_url=next)


@router.post("/login", response_class=HTMLResponse)
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    next: str = Form(""),
):
    email = email.strip()
    if not email or not password:
        return _render_form(
            request, "login.html", error="Email and password are required", email=email, next_url=next, status_code=400
        )
    try:
        identity = get_identity(request)
        user, tokens = await run_in_threadpool(identity.sign_in, email, password)
    except InvalidCredentials:
        return _render_form(
            request, "login.html", error="Invalid email or password", email=email, next_url=next, status_code=401
        )
    except IdentityError as exc:
        logger.error("login.identity_unavailable", extra={"extra_data": {"error": str(exc)}})
        return _render_form(
            request,
            "login.html",
            error="Sign-in is temporarily unavailable, please try again.",
            email=email,
            next_url=next,
            status_code=503,
        )
    store_tokens(request, tokens)
    logger.info("login.succeeded", extra={"extra_data": {"user_id": user.id}})
    return RedirectResponse(url=_safe_next(next, request.app.state.settings.HOME_PATH), status_code=302)


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(request: Request, decision: GateDecision = Depends(auth_page_decision)):
    if decision is GateDecision.REDIRECT_TO_HOME:
        return RedirectResponse(url=request.app.state.settings.HOME_PATH, status_code=302)
    return _render_form(request, "signup.html")


@router.post("/signup", response_class=HTMLResponse)
async def signup_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    display_name: str = Form(""),
):
    email = email.strip()
    if not email or not password:
        return _render_form(request, "signup.html", error="Email and password are required", email=email, status_code=400)
    try:
        identity = get_identity(request)
        user, tokens = await run_in_threadpool(identity.sign_up, email, password, display_name.strip() or None)
    except InvalidCredentials as exc:
        return _render_form(request, "signup.html", error=str(exc), email=email, status_code=400)
    except IdentityError as exc:
        logger.error("signup.identity_unavailable", extra={"extra_data": {"error": str(exc)}})
        return _render_form(
            request,
            "signup.html",
            error="Sign-up is temporarily unavailable, please try again.",
            email=email,
            status_code=503,
        )
    logger.info("signup.succeeded", extra={"extra_data": {"user_id": user.id, "confirmed": tokens is not None}})
    if tokens is None:
        templates = request.app.state.templates
        return templates.TemplateResponse(request, "signup_pending.html", {"email": email})
    store_tokens(request, tokens)
    return RedirectResponse(url=request.app.state.settings.HOME_PATH, status_code=302)


@router.post("/signout")
async def signout(request: Request):
    credentials = SessionCredentials.from_request(request)
    if credentials.access_token:
        try:
            identity = get_identity(request)
            await run_in_threadpool(identity.sign_out, credentials.access_token)
        except IdentityError as exc:
            # The cookie is dropped below either way; the token just lives until it expires.
            logger.warning("signout.identity_failed", extra={"extra_data": {"error": str(exc)}})
    clear_tokens(request)
    get_auth_context(request).forget()
    return RedirectResponse(url="/", status_code=302, headers=SIGNOUT_HEADERS)
