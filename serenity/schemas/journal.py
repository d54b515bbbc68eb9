from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..services.moods import describe_mood_score


class JournalCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    content: str = Field(..., min_length=1)
    mood_score: Optional[int] = Field(default=None, ge=0, le=10)
    mood_tags: list[str] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "example": {"title": "Evening walk", "content": "Felt calmer after the walk.", "mood_score": 7}
        }
    }


class JournalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: Optional[str] = None
    content: str
    summary: Optional[str] = None
    mood_score: Optional[int] = None
    mood_tags: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    is_processing: bool = False
    created_at: str

    @field_validator("mood_tags", "keywords", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []


class JournalDetail(BaseModel):
    """Display-ready shape used by the journal detail view and API."""

    id: int
    date: str
    title: Optional[str] = None
    mood: str
    entry: str
    summary: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
    song: Optional[str] = None

    @classmethod
    def from_journal(cls, journal) -> "JournalDetail":
        return cls(
            id=journal.id,
            date=journal.created_at,
            title=journal.title,
            mood=describe_mood_score(journal.mood_score, journal.mood_tags),
            entry=journal.content,
            summary=journal.summary,
            keywords=list(journal.keywords or []),
            song=journal.song,
        )
