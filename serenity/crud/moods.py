"""Mood logs and the trend summary built from them."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import ResourceNotFound
from ..models.mood import MoodLog
from ..services.moods import MoodTrend, summarise_trend
from .base import backend_errors, utcnow


def log_mood(db: Session, user_id: str, score: int, note: str | None = None) -> MoodLog:
    if not 1 <= int(score) <= 5:
        raise ValueError("score must be between 1 and 5")
    entry = MoodLog(user_id=user_id, score=int(score), note=(note or "").strip() or None, created_at=utcnow())
    with backend_errors(db, "Failed to save mood"):
        db.add(entry)
        db.commit()
        db.refresh(entry)
    return entry


def recent_scores(db: Session, user_id: str, days: int = 7) -> list[int]:
    since = (datetime.now(timezone.utc) - timedelta(days=days)).isoformat(timespec="seconds")
    stmt = (
        select(MoodLog.score)
        .where(MoodLog.user_id == user_id, MoodLog.created_at >= since)
        .order_by(MoodLog.created_at, MoodLog.id)
    )
    with backend_errors(db, "Failed to fetch mood trends"):
        return list(db.execute(stmt).scalars().all())


def mood_trends(db: Session, user_id: str, days: int = 7) -> MoodTrend:
    trend = summarise_trend(recent_scores(db, user_id, days=days))
    if trend is None:
        raise ResourceNotFound("mood data", user_id)
    return trend
