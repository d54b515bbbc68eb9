"""A user's planned and completed activities."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import ResourceNotFound
from ..models.activity import UserActivity
from .activities import get_activity
from .base import backend_errors, utcnow

STATUSES = ("in_progress", "completed")


def _check_status(status: str | None) -> str | None:
    if status is None:
        return None
    status = status.strip().lower()
    if status not in STATUSES:
        raise ValueError(f"status must be one of: {', '.join(STATUSES)}")
    return status


def list_user_activities(db: Session, user_id: str, status: str | None = None) -> list[UserActivity]:
    status = _check_status(status)
    stmt = select(UserActivity).where(UserActivity.user_id == user_id).order_by(
        UserActivity.planned_at, UserActivity.id
    )
    if status:
        stmt = stmt.where(UserActivity.status == status)
    with backend_errors(db, "Failed to fetch user activities"):
        return list(db.execute(stmt).scalars().unique().all())


def plan_activity(db: Session, user_id: str, payload: dict) -> UserActivity:
    activity = get_activity(db, payload["activity_id"])
    status = _check_status(payload.get("status")) or "in_progress"
    record = UserActivity(
        user_id=user_id,
        activity_id=activity.id,
        status=status,
        planned_at=payload.get("planned_at") or utcnow(),
        completed_at=payload.get("completed_at"),
        reflection=payload.get("reflection"),
        created_at=utcnow(),
    )
    with backend_errors(db, "Failed to create activity"):
        db.add(record)
        db.commit()
        db.refresh(record)
    return record


def update_user_activity(db: Session, user_id: str, record_id: int, payload: dict) -> UserActivity:
    stmt = select(UserActivity).where(UserActivity.id == record_id, UserActivity.user_id == user_id)
    with backend_errors(db, "Failed to update activity"):
        record = db.execute(stmt).scalars().first()
    if record is None:
        raise ResourceNotFound("activity", record_id)
    if "status" in payload:
        record.status = _check_status(payload.get("status")) or record.status
    for field in ("completed_at", "reflection"):
        if field in payload:
            setattr(record, field, payload.get(field) or None)
    # A completed activity always carries its completion time.
    if record.status == "completed" and not record.completed_at:
        record.completed_at = utcnow()
    with backend_errors(db, "Failed to update activity"):
        db.commit()
        db.refresh(record)
    return record
