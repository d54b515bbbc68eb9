from __future__ import annotations

from sqlalchemy import Column, Integer, String, Text

from ..db.session import Base


class MoodLog(Base):
    __tablename__ = "mood_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False, index=True)


__all__ = ["MoodLog"]
