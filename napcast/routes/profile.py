"""Baby profile API: read and upsert the single active profile."""

from fastapi import APIRouter, Depends, HTTPException, Body
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import BabyProfileOut, BabyProfileUpsert
from ..services.sleep_service import sleep_service

router = APIRouter(tags=["profile"])


@router.get("/", response_model=BabyProfileOut)
def get_profile(db: Session = Depends(get_db)):
    profile = sleep_service.get_active_profile(db)
    if not profile:
        raise HTTPException(status_code=404, detail="No baby profile yet")
    return profile


@router.put("/", response_model=BabyProfileOut)
def put_profile(
    db: Session = Depends(get_db),
    profile_in: BabyProfileUpsert = Body(...),
):
    return sleep_service.upsert_profile(db, profile_in)
