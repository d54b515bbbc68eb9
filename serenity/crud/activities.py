"""Read helpers for the shared activity catalogue."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import ResourceNotFound
from ..models.activity import Activity
from .base import backend_errors

CATEGORIES = ("physical", "mental", "social")


def normalise_category(category: str | None) -> str | None:
    value = (category or "").strip().lower()
    return value or None


def list_activities(db: Session, category: str | None = None) -> list[Activity]:
    category = normalise_category(category)
    stmt = select(Activity).order_by(Activity.title, Activity.id)
    if category:
        stmt = stmt.where(Activity.category == category)
    with backend_errors(db, "Failed to fetch activities"):
        return list(db.execute(stmt).scalars().all())


def get_activity(db: Session, activity_id: int) -> Activity:
    with backend_errors(db, "Failed to fetch activity"):
        activity = db.get(Activity, activity_id)
    if activity is None:
        raise ResourceNotFound("activity", activity_id)
    return activity
