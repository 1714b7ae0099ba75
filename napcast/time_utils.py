"""
Timezone and instant helpers shared by the learner and the scheduler.

All instants handled by the core are timezone-aware UTC datetimes. Local
calendar days and hours are derived through an explicit pytz timezone.
"""

from datetime import date, datetime, time, timedelta
from typing import Union

import pytz
from dateutil import parser as date_parser

TimezoneLike = Union[str, pytz.BaseTzInfo, None]


def resolve_timezone(tz: TimezoneLike = None) -> pytz.BaseTzInfo:
    """Return a pytz timezone for a zone name or tzinfo; None means UTC."""
    if tz is None:
        return pytz.UTC
    if isinstance(tz, str):
        try:
            return pytz.timezone(tz)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {tz}")
    return tz


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC. Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def to_local(value: datetime, tz: TimezoneLike) -> datetime:
    return as_utc(value).astimezone(resolve_timezone(tz))


def local_datetime(day: date, at: time, tz: TimezoneLike) -> datetime:
    """Instant (in UTC) of a wall-clock time on a local calendar day."""
    return resolve_timezone(tz).localize(datetime.combine(day, at)).astimezone(pytz.UTC)


def local_day_bounds(day: date, tz: TimezoneLike) -> tuple[datetime, datetime]:
    """Start (00:00:00) and end (23:59:59.999999) of a local calendar day."""
    return local_datetime(day, time.min, tz), local_datetime(day, time.max, tz)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated toward zero (negative when end precedes start)."""
    return int((as_utc(end) - as_utc(start)).total_seconds() / 60)


def add_minutes(value: datetime, minutes: float) -> datetime:
    return value + timedelta(minutes=minutes)


def parse_date(value: Union[str, date, datetime]) -> date:
    """Accept a date, a datetime or an ISO-8601 string and return the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(value).date()
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid date: {value!r}") from e
