from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session as DbSession

from ..access.session import Session
from ..crud.activities import list_activities
from ..crud.recommendations import recommend_activities
from ..crud.user_activities import list_user_activities, plan_activity, update_user_activity
from ..db.session import get_db
from ..deps.auth import require_api_session
from ..schemas.activity import (
    ActivityOut,
    RecommendationsOut,
    UserActivityCreate,
    UserActivityOut,
    UserActivityUpdate,
)
from ..services.recommendations import parse_mood_tags

router = APIRouter(prefix="/api", tags=["activities"])

NO_STORE = {"Cache-Control": "no-store"}


@router.get("/activities", response_model=list[ActivityOut])
def api_list_activities(
    category: str | None = Query(default=None),
    session: Session = Depends(require_api_session),
    db: DbSession = Depends(get_db),
):
    activities = list_activities(db, category)
    payload = [ActivityOut.model_validate(activity).model_dump() for activity in activities]
    return JSONResponse(payload, headers={"Cache-Control": "private, max-age=60"})


@router.get("/user-activities", response_model=list[UserActivityOut])
def api_list_user_activities(
    status: str | None = Query(default=None),
    session: Session = Depends(require_api_session),
    db: DbSession = Depends(get_db),
):
    try:
        records = list_user_activities(db, session.user.id, status=status)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    payload = [UserActivityOut.model_validate(record).model_dump() for record in records]
    return JSONResponse(payload, headers=NO_STORE)


@router.post("/user-activities", response_model=UserActivityOut, status_code=201)
def api_plan_activity(
    payload: UserActivityCreate,
    session: Session = Depends(require_api_session),
    db: DbSession = Depends(get_db),
):
    try:
        record = plan_activity(db, session.user.id, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return UserActivityOut.model_validate(record)


@router.patch("/user-activities/{record_id}", response_model=UserActivityOut)
def api_update_user_activity(
    record_id: int,
    payload: UserActivityUpdate,
    session: Session = Depends(require_api_session),
    db: DbSession = Depends(get_db),
):
    try:
        record = update_user_activity(db, session.user.id, record_id, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return UserActivityOut.model_validate(record)


@router.get("/recommended-activities", response_model=RecommendationsOut)
def api_recommended_activities(
    mood_tags: str | None = Query(default=None),
    limit: int = Query(default=5, ge=1, le=20),
    session: Session = Depends(require_api_session),
    db: DbSession = Depends(get_db),
):
    recommendations = recommend_activities(db, session.user.id, parse_mood_tags(mood_tags), limit=limit)
    payload = RecommendationsOut.model_validate(recommendations).model_dump()
    return JSONResponse(payload, headers={"Cache-Control": "private, max-age=60"})
