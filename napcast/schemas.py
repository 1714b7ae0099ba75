from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional, List
from .models import SessionSource, BlockKind, CoachSeverity
from .time_utils import as_utc


class UTCModel(BaseModel):
    """Base for records whose datetime fields are normalized to aware UTC."""

    @field_validator("*", mode="after")
    @classmethod
    def _normalize_datetimes(cls, value):
        if isinstance(value, datetime):
            return as_utc(value)
        return value


# ----------------- Configuration ---------------------

class LearnerConfig(BaseModel):
    lookback_days: float = Field(14, gt=0)
    alpha_nap: float = Field(0.35, gt=0, le=1)
    alpha_wake: float = Field(0.35, gt=0, le=1)
    min_samples_for_high_confidence: int = Field(20, gt=0)

    class Config:
        frozen = True

    def with_overrides(self, **overrides) -> "LearnerConfig":
        """Return a validated copy with the given fields replaced."""
        return type(self)(**{**self.model_dump(), **overrides})


class ScheduleConfig(BaseModel):
    horizon_days: int = Field(2, ge=1)  # today + tomorrow
    max_nap_cycles_per_day: int = Field(4, ge=0)
    wind_down_lead_min: float = Field(20, ge=0)
    bedtime_wake_factor: float = Field(1.25, gt=0)

    class Config:
        frozen = True

    def with_overrides(self, **overrides) -> "ScheduleConfig":
        return type(self)(**{**self.model_dump(), **overrides})


# ----------------- Baby Profile Schemas ---------------------

class BabyProfileBase(BaseModel):
    name: str = ""
    birth_date: date

class BabyProfileUpsert(BabyProfileBase):
    pass

class BabyProfileOut(BabyProfileBase, UTCModel):
    id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ----------------- Sleep Session Schemas ---------------------

class SleepSessionCreate(UTCModel):
    start_at: datetime
    end_at: datetime
    quality: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None
    source: SessionSource = SessionSource.MANUAL

class SleepSessionUpdate(UTCModel):
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    quality: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None
    source: Optional[SessionSource] = None

class SleepSession(UTCModel):
    id: str
    start_at: datetime  # inclusive
    end_at: datetime  # exclusive
    quality: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None
    source: SessionSource = SessionSource.MANUAL
    deleted: bool = False
    updated_at: datetime

    class Config:
        from_attributes = True


# ----------------- Learner & Schedule Schemas ---------------------

class LearnerState(UTCModel):
    version: int = 1
    ewma_nap_length_min: float = Field(..., gt=0)
    ewma_wake_window_min: float = Field(..., gt=0)
    last_updated_at: datetime
    confidence: float = Field(..., ge=0, le=1)

    class Config:
        from_attributes = True

class ScheduleBlock(UTCModel):
    id: str
    kind: BlockKind
    start_at: datetime
    end_at: datetime
    confidence: float = Field(..., ge=0, le=1)
    rationale: str

    class Config:
        frozen = True


# ----------------- Collaborator Outputs ---------------------

class CoachInsight(UTCModel):
    id: str
    severity: CoachSeverity
    title: str
    message: str
    tags: List[str] = []
    created_at: datetime

class NotificationPlan(UTCModel):
    id: str
    block_id: str
    kind: BlockKind
    fire_at: datetime
    title: str
    body: str

class ScheduleResponse(BaseModel):
    learner_state: LearnerState
    blocks: List[ScheduleBlock]
    insights: List[CoachInsight]
    notifications: List[NotificationPlan]
    wake_offset_min: float = 0
