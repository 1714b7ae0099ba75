"""Sleep session API: log, list, edit and soft-delete sessions."""

from typing import List, Optional
from datetime import date as _date
from fastapi import APIRouter, Depends, HTTPException, Query, Body
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import SleepSession, SleepSessionCreate, SleepSessionUpdate
from ..services.sleep_service import sleep_service
from ..time_utils import as_utc

router = APIRouter(tags=["sessions"])


def _get_session_or_404(db: Session, session_id: str):
    session = sleep_service.get_session(db, session_id)
    if not session or session.deleted:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


# list sessions, optionally only those overlapping one local calendar day
@router.get("/", response_model=List[SleepSession])
def list_sessions(
    db: Session = Depends(get_db),
    date: Optional[_date] = Query(None),
):
    return sleep_service.list_sessions(db, day=date)


@router.get("/{session_id}", response_model=SleepSession)
def get_session(session_id: str, db: Session = Depends(get_db)):
    return _get_session_or_404(db, session_id)


@router.post("/", response_model=SleepSession, status_code=201)
def create_session(
    db: Session = Depends(get_db),
    session_in: SleepSessionCreate = Body(...),
):
    if session_in.end_at <= session_in.start_at:
        raise HTTPException(status_code=400, detail="Session end must be after its start")
    return sleep_service.create_session(db, session_in)


@router.patch("/{session_id}", response_model=SleepSession)
def update_session(
    session_id: str,
    db: Session = Depends(get_db),
    session_in: SleepSessionUpdate = Body(...),
):
    session = _get_session_or_404(db, session_id)

    start = session_in.start_at or as_utc(session.start_at)
    end = session_in.end_at or as_utc(session.end_at)
    if end <= start:
        raise HTTPException(status_code=400, detail="Session end must be after its start")

    return sleep_service.update_session(db, session, session_in)


@router.delete("/{session_id}", response_model=SleepSession)
def delete_session(session_id: str, db: Session = Depends(get_db)):
    session = _get_session_or_404(db, session_id)
    return sleep_service.soft_delete_session(db, session)
