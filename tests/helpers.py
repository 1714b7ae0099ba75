"""Shared builders for sessions and learner states."""

import uuid
from datetime import datetime

import pytz

from napcast.schemas import LearnerState, SleepSession

BIRTH_DATE = "2024-01-01"


def utc(year, month, day, hour=0, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=pytz.UTC)


def make_session(start: datetime, end: datetime, deleted: bool = False, source: str = "manual") -> SleepSession:
    return SleepSession(
        id=f"sess_{uuid.uuid4().hex[:8]}",
        start_at=start,
        end_at=end,
        quality=3,
        notes=None,
        source=source,
        deleted=deleted,
        updated_at=utc(2024, 7, 1),
    )


def make_learner_state(nap: float = 60, wake: float = 90, confidence: float = 0.8,
                       at: datetime = None) -> LearnerState:
    return LearnerState(
        version=1,
        ewma_nap_length_min=nap,
        ewma_wake_window_min=wake,
        last_updated_at=at or utc(2024, 7, 2, 9),
        confidence=confidence,
    )
