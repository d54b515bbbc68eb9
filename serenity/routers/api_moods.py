from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session as DbSession

from ..access.session import Session
from ..crud.moods import log_mood, mood_trends
from ..db.session import get_db
from ..deps.auth import require_api_session
from ..schemas.mood import MoodCreate, MoodOut, MoodTrendOut

router = APIRouter(prefix="/api", tags=["moods"])


@router.post("/moods", response_model=MoodOut, status_code=201)
def api_log_mood(
    payload: MoodCreate,
    session: Session = Depends(require_api_session),
    db: DbSession = Depends(get_db),
):
    try:
        entry = log_mood(db, session.user.id, payload.score, payload.note)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return MoodOut.model_validate(entry)


@router.get("/mood-trends", response_model=MoodTrendOut)
def api_mood_trends(
    days: int = Query(default=7, ge=1, le=365),
    session: Session = Depends(require_api_session),
    db: DbSession = Depends(get_db),
):
    return MoodTrendOut.model_validate(mood_trends(db, session.user.id, days=days))
