"""Pydantic schemas for the activity catalogue and a user's plans."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    category: str
    estimated_duration: Optional[int] = None


class UserActivityCreate(BaseModel):
    activity_id: int
    status: Literal["in_progress", "completed"] = "in_progress"
    planned_at: Optional[str] = None
    reflection: Optional[str] = None


class UserActivityUpdate(BaseModel):
    status: Optional[Literal["in_progress", "completed"]] = None
    completed_at: Optional[str] = None
    reflection: Optional[str] = Field(default=None, max_length=4000)


class UserActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    activity_id: int
    status: str
    planned_at: Optional[str] = None
    completed_at: Optional[str] = None
    reflection: Optional[str] = None
    activity: Optional[ActivityOut] = None


class RecommendationsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    mood_tags: list[str]
    activities: list[ActivityOut]
