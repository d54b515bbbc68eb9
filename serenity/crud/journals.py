"""Journal entries, always scoped to their owner."""

from __future__ import annotations

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..core.errors import ResourceNotFound
from ..models.journal import Journal
from .base import backend_errors, utcnow


def list_journals(db: Session, user_id: str, limit: int = 50, offset: int = 0) -> list[Journal]:
    stmt = (
        select(Journal)
        .where(Journal.user_id == user_id)
        .order_by(desc(Journal.created_at), desc(Journal.id))
        .limit(limit)
        .offset(offset)
    )
    with backend_errors(db, "Failed to fetch journals"):
        return list(db.execute(stmt).scalars().all())


def get_journal(db: Session, user_id: str, journal_id: int) -> Journal:
    # Someone else's entry is reported exactly like a missing one.
    stmt = select(Journal).where(Journal.id == journal_id, Journal.user_id == user_id)
    with backend_errors(db, "Failed to fetch journal"):
        journal = db.execute(stmt).scalars().first()
    if journal is None:
        raise ResourceNotFound("journal", journal_id)
    return journal


def create_journal(db: Session, user_id: str, payload: dict) -> Journal:
    content = (payload.get("content") or "").strip()
    if not content:
        raise ValueError("content is required")
    mood_score = payload.get("mood_score")
    if mood_score is not None and not 0 <= int(mood_score) <= 10:
        raise ValueError("mood_score must be between 0 and 10")
    journal = Journal(
        user_id=user_id,
        title=(payload.get("title") or "").strip() or None,
        content=content,
        mood_score=mood_score,
        mood_tags=list(payload.get("mood_tags") or []),
        keywords=[],
        is_processing=False,
        created_at=utcnow(),
    )
    with backend_errors(db, "Failed to create journal"):
        db.add(journal)
        db.commit()
        db.refresh(journal)
    return journal
