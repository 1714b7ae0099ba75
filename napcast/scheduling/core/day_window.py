"""
Local calendar day representation for the schedule projection.
"""

from datetime import date, datetime

from ...time_utils import local_day_bounds


class DayWindow:
    """
    One local calendar day of the projection horizon.
    Bounds run from 00:00:00 to 23:59:59.999999 local time, held as UTC instants.
    """
    def __init__(self, day: date, tz, day_offset: int = 0):
        self.day = day
        self.tz = tz
        self.day_offset = day_offset
        self.start, self.end = local_day_bounds(day, tz)

    @property
    def is_today(self) -> bool:
        return self.day_offset == 0

    def strictly_contains(self, instant: datetime) -> bool:
        return self.start < instant < self.end

    def clamp_start(self, instant: datetime) -> datetime:
        """Move an instant forward to the start of the day if it predates it."""
        return instant if instant >= self.start else self.start

    def __repr__(self):
        label = "today" if self.is_today else f"+{self.day_offset}d"
        return f"DayWindow({self.day.isoformat()}, {label})"
