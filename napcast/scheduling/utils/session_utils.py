"""
Session-specific helpers for filtering, ordering and anchoring.

Sessions are duck-typed: anything exposing ``start_at``, ``end_at`` and
``deleted`` works (pydantic records or ORM rows).
"""

from datetime import datetime
from typing import Iterable, List, Optional

from ...time_utils import as_utc, minutes_between


def session_minutes(session) -> int:
    return minutes_between(session.start_at, session.end_at)


def active_sessions(sessions: Iterable) -> List:
    """Non-deleted sessions with end after start, sorted by start ascending."""
    remaining = [
        s for s in sessions
        if not getattr(s, "deleted", False) and as_utc(s.end_at) > as_utc(s.start_at)
    ]
    remaining.sort(key=lambda s: as_utc(s.start_at))
    return remaining


def find_current_session(sessions: List, now: datetime):
    """Session whose interval straddles now (start <= now < end), if any."""
    for session in sessions:
        if as_utc(session.start_at) <= now < as_utc(session.end_at):
            return session
    return None


def find_last_session_ending_by(sessions: List, now: datetime):
    """Most recently ending session with end <= now; earliest in order wins ties."""
    last = None
    for session in sessions:
        end = as_utc(session.end_at)
        if end <= now and (last is None or end > as_utc(last.end_at)):
            last = session
    return last


def resolve_anchor(sessions: Iterable, now: datetime) -> datetime:
    """
    Instant the next wake window is counted from:
    - end of the session in progress (baby currently sleeping), else
    - end of the most recent session that ended by now, else
    - now itself.
    """
    ordered = active_sessions(sessions)

    current = find_current_session(ordered, now)
    if current is not None:
        return as_utc(current.end_at)

    last = find_last_session_ending_by(ordered, now)
    if last is not None:
        return as_utc(last.end_at)

    return now


def overlaps_window(session, window_start: datetime, window_end: datetime) -> bool:
    # end_at is exclusive
    return as_utc(session.start_at) <= window_end and as_utc(session.end_at) > window_start
