"""
Sleep service: persistence of profile and sessions, learner-state caching, and
orchestration of learner -> scheduler -> coach/notifications.
"""

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from ..config import get_settings
from ..models import BabyProfile, SleepSession, LearnerStateRecord
from ..schemas import (
    BabyProfileUpsert, SleepSessionCreate, SleepSessionUpdate, LearnerConfig, ScheduleConfig,
    LearnerState, ScheduleResponse,
    SleepSession as SleepSessionSchema,
)
from ..scheduling import compute_learner_state, generate_schedule, shift_wake_window
from ..scheduling.utils.session_utils import overlaps_window
from ..time_utils import as_utc, local_day_bounds, utc_now
from .coach import compute_coach_insights
from .notifications import build_notification_plan

logger = logging.getLogger(__name__)

LEARNER_STATE_KEY = "default"

# Only these session fields may be cleared with an explicit null
NULLABLE_SESSION_FIELDS = {"quality", "notes"}


def _to_db(value: datetime) -> datetime:
    """Aware instant -> naive UTC for storage."""
    return as_utc(value).replace(tzinfo=None)


class ProfileMissingError(Exception):
    """Raised when an operation needs the baby profile and none exists yet."""


class SleepService:
    """Service layer shared by the API routes."""

    def __init__(self, learner_config: Optional[LearnerConfig] = None,
                 schedule_config: Optional[ScheduleConfig] = None, tz=None):
        self.learner_config = learner_config or LearnerConfig()
        self.schedule_config = schedule_config or ScheduleConfig()
        self._tz = tz

    @property
    def tz(self):
        return self._tz if self._tz is not None else get_settings().timezone

# ================================
# PROFILE
# ================================

    def get_active_profile(self, db: Session) -> Optional[BabyProfile]:
        """The oldest profile is the active one."""
        return db.query(BabyProfile).order_by(BabyProfile.created_at.asc()).first()

    def upsert_profile(self, db: Session, profile_in: BabyProfileUpsert) -> BabyProfile:
        profile = self.get_active_profile(db)
        if profile is None:
            profile = BabyProfile(id=str(uuid.uuid4()), name=profile_in.name, birth_date=profile_in.birth_date)
            db.add(profile)
        else:
            profile.name = profile_in.name
            profile.birth_date = profile_in.birth_date
        db.commit()
        db.refresh(profile)
        logger.info(f"Saved baby profile {profile.id} (born {profile.birth_date})")
        return profile

# ================================
# SESSIONS
# ================================

    def list_sessions(self, db: Session, day: Optional[date] = None, include_deleted: bool = False) -> List[SleepSession]:
        query = db.query(SleepSession)
        if not include_deleted:
            query = query.filter(SleepSession.deleted == False)  # noqa: E712
        sessions = query.order_by(SleepSession.start_at.asc()).all()
        if day is None:
            return sessions
        day_start, day_end = local_day_bounds(day, self.tz)
        return [s for s in sessions if overlaps_window(s, day_start, day_end)]

    def get_session(self, db: Session, session_id: str) -> Optional[SleepSession]:
        return db.query(SleepSession).filter(SleepSession.id == session_id).first()

    def create_session(self, db: Session, session_in: SleepSessionCreate) -> SleepSession:
        session = SleepSession(
            id=str(uuid.uuid4()),
            start_at=_to_db(session_in.start_at),
            end_at=_to_db(session_in.end_at),
            quality=session_in.quality,
            notes=session_in.notes,
            source=session_in.source,
            deleted=False,
        )
        db.add(session)
        db.commit()
        db.refresh(session)
        logger.info(f"Logged {session.source.value} session {session.id}")
        return session

    def update_session(self, db: Session, session: SleepSession, session_in: SleepSessionUpdate) -> SleepSession:
        changes = {
            field: value
            for field, value in session_in.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_SESSION_FIELDS
        }
        for field, value in changes.items():
            if isinstance(value, datetime):
                value = _to_db(value)
            setattr(session, field, value)
        db.commit()
        db.refresh(session)
        logger.info(f"Updated session {session.id}: {sorted(changes)}")
        return session

    def soft_delete_session(self, db: Session, session: SleepSession) -> SleepSession:
        session.deleted = True
        db.commit()
        db.refresh(session)
        logger.info(f"Soft-deleted session {session.id}")
        return session

# ================================
# LEARNER & SCHEDULE
# ================================

    def _load_inputs(self, db: Session):
        profile = self.get_active_profile(db)
        if profile is None:
            raise ProfileMissingError("A baby profile is required before computing a schedule")
        sessions = [SleepSessionSchema.model_validate(s) for s in self.list_sessions(db)]
        return profile, sessions

    def compute_learner(self, db: Session, now: Optional[datetime] = None) -> LearnerState:
        """Recompute the learner state from stored sessions and cache it."""
        profile, sessions = self._load_inputs(db)
        state = compute_learner_state(profile.birth_date, sessions, now, self.learner_config, self.tz)
        self.cache_learner_state(db, state)
        return state

    def cache_learner_state(self, db: Session, state: LearnerState) -> LearnerStateRecord:
        record = db.query(LearnerStateRecord).filter(LearnerStateRecord.id == LEARNER_STATE_KEY).first()
        if record is None:
            record = LearnerStateRecord(id=LEARNER_STATE_KEY)
            db.add(record)
        record.version = state.version
        record.ewma_nap_length_min = state.ewma_nap_length_min
        record.ewma_wake_window_min = state.ewma_wake_window_min
        record.last_updated_at = _to_db(state.last_updated_at)
        record.confidence = state.confidence
        db.commit()
        return record

    def get_cached_learner_state(self, db: Session) -> Optional[LearnerState]:
        record = db.query(LearnerStateRecord).filter(LearnerStateRecord.id == LEARNER_STATE_KEY).first()
        return LearnerState.model_validate(record) if record else None

    def refresh(self, db: Session, now: Optional[datetime] = None, wake_offset_min: float = 0) -> ScheduleResponse:
        """
        Full pipeline as of `now`: learner state (cached), schedule (optionally
        with a what-if wake-window offset), coaching insights and notifications.
        """
        now = as_utc(now) if now is not None else utc_now()
        profile, sessions = self._load_inputs(db)

        state = compute_learner_state(profile.birth_date, sessions, now, self.learner_config, self.tz)
        self.cache_learner_state(db, state)

        schedule_state = shift_wake_window(state, wake_offset_min)
        blocks = generate_schedule(schedule_state, sessions, now, self.schedule_config, self.tz)

        # Coach looks at the same lookback window the learner used
        cutoff = now - timedelta(days=self.learner_config.lookback_days)
        recent = [s for s in sessions if s.end_at >= cutoff]
        insights = compute_coach_insights(recent, state, now, self.tz)
        notifications = build_notification_plan(blocks, now)

        logger.info(
            f"Schedule refreshed: {len(sessions)} sessions, {len(blocks)} blocks, "
            f"confidence {state.confidence:.2f}, wake offset {wake_offset_min}m"
        )
        return ScheduleResponse(
            learner_state=state,
            blocks=blocks,
            insights=insights,
            notifications=notifications,
            wake_offset_min=wake_offset_min,
        )


# Global sleep service instance
sleep_service = SleepService()
