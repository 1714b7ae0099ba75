"""
Classification rules deciding which sessions and gaps the learner may use,
and the local evening window bedtime is kept inside.
"""

from datetime import date, datetime

from ...time_utils import add_minutes, local_datetime, minutes_between, to_local
from ..core.constants import (
    NIGHT_START_HOUR, NIGHT_END_HOUR,
    MIN_NAP_MINUTES, MAX_NAP_MINUTES, MAX_WAKE_WINDOW_MINUTES,
    EARLIEST_BEDTIME, LATEST_BEDTIME,
)


def is_likely_night_sleep(start: datetime, end: datetime, tz) -> bool:
    """
    A session is night sleep when its midpoint (start plus half the whole-minute
    duration) lands in [18:00, 06:00) local time, however long it is.
    """
    midpoint = add_minutes(start, minutes_between(start, end) / 2)
    hour = to_local(midpoint, tz).hour
    return hour >= NIGHT_START_HOUR or hour < NIGHT_END_HOUR


def is_valid_nap_duration(minutes: float) -> bool:
    return MIN_NAP_MINUTES <= minutes <= MAX_NAP_MINUTES


def is_valid_wake_window(minutes: float) -> bool:
    # Longer gaps are treated as missing logs, not as real wake windows
    return 0 < minutes <= MAX_WAKE_WINDOW_MINUTES


def clamp_to_bedtime_window(candidate: datetime, day: date, tz) -> datetime:
    """Snap a bedtime candidate into [18:00, 22:00] of the given local day."""
    earliest = local_datetime(day, EARLIEST_BEDTIME, tz)
    latest = local_datetime(day, LATEST_BEDTIME, tz)
    if candidate < earliest:
        return earliest
    if candidate > latest:
        return latest
    return candidate
