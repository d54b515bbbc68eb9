from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session as DbSession

from ..access.session import Session
from ..crud.journals import create_journal, get_journal, list_journals
from ..db.session import get_db
from ..deps.auth import require_api_session
from ..schemas.journal import JournalCreate, JournalDetail, JournalOut

router = APIRouter(prefix="/api/journal", tags=["journal"])

PRIVATE_CACHE = {"Cache-Control": "private, max-age=30"}


@router.get("", response_model=list[JournalOut])
def api_list_journals(
    limit: int = 50,
    offset: int = 0,
    session: Session = Depends(require_api_session),
    db: DbSession = Depends(get_db),
):
    journals = list_journals(db, session.user.id, limit=max(1, min(limit, 200)), offset=max(0, offset))
    payload = [JournalOut.model_validate(journal).model_dump() for journal in journals]
    return JSONResponse(payload, headers=PRIVATE_CACHE)


@router.post("", response_model=JournalOut, status_code=201)
def api_create_journal(
    payload: JournalCreate,
    session: Session = Depends(require_api_session),
    db: DbSession = Depends(get_db),
):
    try:
        journal = create_journal(db, session.user.id, payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return JournalOut.model_validate(journal)


@router.get("/{journal_id}", response_model=JournalDetail)
def api_get_journal(
    journal_id: int,
    session: Session = Depends(require_api_session),
    db: DbSession = Depends(get_db),
):
    journal = get_journal(db, session.user.id, journal_id)
    return JSONResponse(JournalDetail.from_journal(journal).model_dump(), headers=PRIVATE_CACHE)
