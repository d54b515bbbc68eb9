from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MoodCreate(BaseModel):
    score: int = Field(..., ge=1, le=5)
    note: Optional[str] = Field(default=None, max_length=1000)


class MoodOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    score: int
    note: Optional[str] = None
    created_at: str


class MoodTrendOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    average_mood: float
    mood_trend: str
    total_entries: int
    mood_change: float
