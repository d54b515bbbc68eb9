"""Application factory for the Serenity wellness app.

``create_app`` wires configuration, the database, templates, the session
cookie and the access gate together. Collaborators (settings, the identity
client factory, the SQLAlchemy engine) are passed in rather than looked up
from module globals, so tests and deployments can swap them per app.

Middleware order, outermost first:

1. ``RequestIdMiddleware``: correlation id and the access log line.
2. ``SecurityHeadersMiddleware``.
3. ``SessionMiddleware``: decodes the signed session cookie.
4. ``AccessGateMiddleware``: redirects before any router runs.
"""

from __future__ import annotations

from typing import Callable

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine
from starlette.middleware.sessions import SessionMiddleware

from .access.routes import RouteClassifier
from .core.config import AppSettings, get_settings
from .core.errors import register_exception_handlers
from .core.jinja import get_templates
from .db.session import Base, build_engine, build_session_factory
from .middlewares import AccessGateMiddleware, RequestIdMiddleware, SecurityHeadersMiddleware
from .services.identity import IdentityService, SupabaseIdentityFactory

# Registers the tables with ``Base.metadata``.
from . import models as _models  # noqa: F401


def create_app(
    settings: AppSettings | None = None,
    *,
    identity_factory: Callable[[], IdentityService] | None = None,
    engine: Engine | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.APP_NAME)

    engine = engine or build_engine(settings.DB_URL)
    Base.metadata.create_all(bind=engine)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.identity_factory = identity_factory or SupabaseIdentityFactory(settings)
    app.state.route_classifier = RouteClassifier.from_settings(settings)
    app.state.templates = get_templates(settings)

    app.mount("/static", StaticFiles(directory=str(settings.static_dir)), name="static")

    # ``add_middleware`` wraps what is already there, so the innermost goes first.
    app.add_middleware(
        AccessGateMiddleware,
        classifier=app.state.route_classifier,
        login_path=settings.LOGIN_PATH,
        home_path=settings.HOME_PATH,
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.APP_SECRET,
        session_cookie=settings.SESSION_COOKIE_NAME,
        max_age=settings.SESSION_MAX_AGE,
        same_site="lax",
        https_only=settings.SESSION_HTTPS_ONLY,
    )
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.SESSION_HTTPS_ONLY)
    app.add_middleware(RequestIdMiddleware)

    from .routers import api_activities, api_journal, api_moods, auth_ui, pages

    app.include_router(auth_ui.router)
    app.include_router(pages.router)
    app.include_router(pages.protected)
    app.include_router(api_activities.router)
    app.include_router(api_journal.router)
    app.include_router(api_moods.router)

    register_exception_handlers(app)

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    return app


__all__ = ["create_app"]
