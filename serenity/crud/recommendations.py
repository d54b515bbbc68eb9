"""Activity recommendations for the signed-in user."""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..models.activity import Activity, UserActivity
from ..models.journal import Journal
from ..models.mood import MoodLog
from ..services.recommendations import DEFAULT_MOOD_TAGS, rank_activities, tags_for_score
from .base import backend_errors

FETCH_FAILED = "Failed to fetch recommended activities"


@dataclass
class Recommendations:
    mood_tags: list[str]
    activities: list[Activity] = field(default_factory=list)


def current_mood_tags(db: Session, user_id: str) -> list[str]:
    """Tags of the latest journal entry, else the latest mood check-in."""

    journal_stmt = (
        select(Journal.mood_tags)
        .where(Journal.user_id == user_id)
        .order_by(desc(Journal.created_at), desc(Journal.id))
        .limit(1)
    )
    mood_stmt = (
        select(MoodLog.score)
        .where(MoodLog.user_id == user_id)
        .order_by(desc(MoodLog.created_at), desc(MoodLog.id))
        .limit(1)
    )
    with backend_errors(db, FETCH_FAILED):
        tags = db.execute(journal_stmt).scalars().first()
        if tags:
            return [str(tag).strip().lower() for tag in tags if str(tag).strip()]
        score = db.execute(mood_stmt).scalars().first()
    if score is not None:
        return tags_for_score(score)
    return list(DEFAULT_MOOD_TAGS)


def recommend_activities(
    db: Session, user_id: str, mood_tags: list[str] | None = None, limit: int = 5
) -> Recommendations:
    mood_tags = mood_tags or current_mood_tags(db, user_id)
    completed_stmt = select(UserActivity.activity_id).where(
        UserActivity.user_id == user_id, UserActivity.status == "completed"
    )
    with backend_errors(db, FETCH_FAILED):
        completed = set(db.execute(completed_stmt).scalars().all())
        catalogue = list(db.execute(select(Activity)).scalars().all())
    return Recommendations(
        mood_tags=mood_tags,
        activities=rank_activities(catalogue, mood_tags, exclude_ids=completed, limit=limit),
    )
