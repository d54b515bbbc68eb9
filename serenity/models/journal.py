from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, Integer, String, Text

from ..db.session import Base


class Journal(Base):
    __tablename__ = "journals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    summary = Column(Text, nullable=True)
    mood_score = Column(Integer, nullable=True)
    mood_tags = Column(JSON, nullable=True)
    keywords = Column(JSON, nullable=True)
    song = Column(Text, nullable=True)
    is_processing = Column(Boolean, nullable=False, default=False)
    created_at = Column(Text, nullable=False, index=True)


__all__ = ["Journal"]
