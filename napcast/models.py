from sqlalchemy import String, Integer, Boolean, Enum, Date, DateTime, Float
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime, timezone
from typing import Optional
from .database import Base
import enum


def utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Enums

class SessionSource(str, enum.Enum):
    MANUAL = "manual"
    TIMER = "timer"

class BlockKind(str, enum.Enum):
    NAP = "nap"
    BEDTIME = "bedtime"
    WIND_DOWN = "windDown"

class CoachSeverity(str, enum.Enum):
    INFO = "info"
    TIP = "tip"
    WARN = "warn"
    ALERT = "alert"


# Tables
# Datetimes are stored as naive UTC.

class BabyProfile(Base):
    __tablename__ = "baby_profiles"

    id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, default="")
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive, onupdate=utc_now_naive)


class SleepSession(Base):
    __tablename__ = "sleep_sessions"

    id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
    start_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)  # inclusive
    end_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)  # exclusive
    quality: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # 1-5
    notes: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    source: Mapped[SessionSource] = mapped_column(Enum(SessionSource), default=SessionSource.MANUAL)
    deleted: Mapped[bool] = mapped_column(Boolean, default=False)  # tombstone

    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive, onupdate=utc_now_naive)


class LearnerStateRecord(Base):
    __tablename__ = "learner_state"

    id: Mapped[str] = mapped_column(String, primary_key=True, default="default")
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    ewma_nap_length_min: Mapped[float] = mapped_column(Float, nullable=False)
    ewma_wake_window_min: Mapped[float] = mapped_column(Float, nullable=False)
    last_updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    confidence: Mapped[float] = mapped_column(Float, nullable=False)
