"""Catalogue of wellness activities and the user's plans for them."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..db.session import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(32), nullable=False, index=True)
    estimated_duration = Column(Integer, nullable=True)


class UserActivity(Base):
    """An activity a user has planned (``in_progress``) or finished."""

    __tablename__ = "user_activities"
    __allow_unmapped__ = True

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    activity_id = Column(Integer, ForeignKey("activities.id"), nullable=False)
    status = Column(String(32), nullable=False, default="in_progress")
    planned_at = Column(Text, nullable=True)
    completed_at = Column(Text, nullable=True)
    reflection = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)

    activity = relationship("Activity", lazy="joined")


__all__ = ["Activity", "UserActivity"]
