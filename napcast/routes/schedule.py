"""
Schedule API endpoints: learner state and projected blocks.
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import LearnerState, ScheduleResponse
from ..services.sleep_service import sleep_service, ProfileMissingError

router = APIRouter(tags=["schedule"])


@router.get("/", response_model=ScheduleResponse)
def get_schedule(
    db: Session = Depends(get_db),
    now: Optional[datetime] = Query(None, description="Evaluate as of this instant (defaults to the current time)"),
    wake_offset_min: float = Query(0, ge=-120, le=120, description="What-if shift of the learned wake window"),
):
    """
    Recompute the learner state and project naps, wind-downs and bedtime.
    Recomputed on every call, so the result always reflects the latest sessions.
    """
    try:
        return sleep_service.refresh(db, now=now, wake_offset_min=wake_offset_min)
    except ProfileMissingError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/learner", response_model=LearnerState)
def get_learner_state(
    db: Session = Depends(get_db),
    now: Optional[datetime] = Query(None),
):
    try:
        return sleep_service.compute_learner(db, now=now)
    except ProfileMissingError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/learner/cached", response_model=LearnerState)
def get_cached_learner_state(db: Session = Depends(get_db)):
    state = sleep_service.get_cached_learner_state(db)
    if not state:
        raise HTTPException(status_code=404, detail="Learner state has not been computed yet")
    return state
