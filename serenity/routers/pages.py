"""HTML pages. Everything except the landing page needs a session."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session as DbSession

from ..access.context import lookup_session
from ..access.session import Session
from ..core.errors import ResourceNotFound
from ..crud.activities import CATEGORIES, list_activities, normalise_category
from ..crud.journals import get_journal, list_journals
from ..crud.moods import mood_trends
from ..crud.recommendations import recommend_activities
from ..crud.user_activities import list_user_activities
from ..db.session import get_db
from ..deps.auth import require_page_session
from ..schemas.journal import JournalDetail

router = APIRouter()
protected = APIRouter(dependencies=[Depends(require_page_session)])


def _render(request: Request, template: str, context: dict, status_code: int = 200):
    return request.app.state.templates.TemplateResponse(request, template, context, status_code=status_code)


def _trend_or_none(db: DbSession, user_id: str, days: int):
    try:
        return mood_trends(db, user_id, days=days)
    except ResourceNotFound:
        return None


@router.get("/", response_class=HTMLResponse)
async def landing_page(request: Request):
    lookup = await lookup_session(request)
    return _render(request, "landing.html", {"user": lookup.session.user if lookup.has_session else None})


@protected.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(
    request: Request,
    session: Session = Depends(require_page_session),
    db: DbSession = Depends(get_db),
):
    user_id = session.user.id
    context = {
        "user": session.user,
        "journals": list_journals(db, user_id, limit=5),
        "trend": _trend_or_none(db, user_id, days=7),
        "planned": list_user_activities(db, user_id, status="in_progress"),
        "recommended": recommend_activities(db, user_id, limit=3),
    }
    return _render(request, "dashboard.html", context)


@protected.get("/journal", response_class=HTMLResponse)
def journal_list_page(
    request: Request,
    session: Session = Depends(require_page_session),
    db: DbSession = Depends(get_db),
):
    journals = list_journals(db, session.user.id)
    return _render(request, "journal_list.html", {"user": session.user, "journals": journals})


@protected.get("/journal/{journal_id}", response_class=HTMLResponse)
def journal_detail_page(
    request: Request,
    journal_id: str,
    session: Session = Depends(require_page_session),
    db: DbSession = Depends(get_db),
):
    # Browsers get the not-found page for malformed ids too.
    try:
        parsed_id = int(journal_id)
    except ValueError:
        raise ResourceNotFound("journal", journal_id) from None
    journal = get_journal(db, session.user.id, parsed_id)
    detail = JournalDetail.from_journal(journal)
    return _render(request, "journal_detail.html", {"user": session.user, "journal": detail})


@protected.get("/activities", response_class=HTMLResponse)
def activities_page(
    request: Request,
    category: str | None = None,
    session: Session = Depends(require_page_session),
    db: DbSession = Depends(get_db),
):
    user_id = session.user.id
    context = {
        "user": session.user,
        "category": normalise_category(category),
        "categories": CATEGORIES,
        "activities": list_activities(db, category),
        "planned": list_user_activities(db, user_id, status="in_progress"),
        "completed": list_user_activities(db, user_id, status="completed"),
        "recommended": recommend_activities(db, user_id, limit=3),
    }
    return _render(request, "activities.html", context)


@protected.get("/insights", response_class=HTMLResponse)
def insights_page(
    request: Request,
    session: Session = Depends(require_page_session),
    db: DbSession = Depends(get_db),
):
    user_id = session.user.id
    context = {
        "user": session.user,
        "week": _trend_or_none(db, user_id, days=7),
        "month": _trend_or_none(db, user_id, days=30),
    }
    return _render(request, "insights.html", context)


@protected.get("/chat", response_class=HTMLResponse)
def chat_page(request: Request, session: Session = Depends(require_page_session)):
    return _render(request, "chat.html", {"user": session.user})
