"""
Age-bucketed reference ranges for wake windows and nap lengths.
"""

from datetime import date, datetime
from typing import List, Union

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel

from ...time_utils import parse_date, resolve_timezone, to_local


class AgeBaseline(BaseModel):
    id: str
    min_months: int
    max_months: int
    # typical awake window in minutes
    wake_window_min: float
    wake_window_max: float
    # typical nap length in minutes
    nap_length_min: float
    nap_length_max: float

    class Config:
        frozen = True

    @property
    def nap_length_midpoint(self) -> float:
        return (self.nap_length_min + self.nap_length_max) / 2

    @property
    def wake_window_midpoint(self) -> float:
        return (self.wake_window_min + self.wake_window_max) / 2

    def contains_age(self, months: float) -> bool:
        # Wider than an inclusive [min, max] match, which would send e.g. 2.8 months to the oldest bucket
        return self.min_months <= months < self.max_months + 1


AGE_BASELINES: List[AgeBaseline] = [
    AgeBaseline(id="0_2m", min_months=0, max_months=2,
                wake_window_min=45, wake_window_max=90, nap_length_min=45, nap_length_max=90),
    AgeBaseline(id="3_4m", min_months=3, max_months=4,
                wake_window_min=75, wake_window_max=120, nap_length_min=45, nap_length_max=90),
    AgeBaseline(id="5_7m", min_months=5, max_months=7,
                wake_window_min=120, wake_window_max=150, nap_length_min=60, nap_length_max=90),
    AgeBaseline(id="8_10m", min_months=8, max_months=10,
                wake_window_min=150, wake_window_max=180, nap_length_min=60, nap_length_max=90),
    AgeBaseline(id="11_14m", min_months=11, max_months=14,
                wake_window_min=180, wake_window_max=210, nap_length_min=60, nap_length_max=90),
    AgeBaseline(id="15_24m", min_months=15, max_months=24,
                wake_window_min=210, wake_window_max=240, nap_length_min=60, nap_length_max=90),
]


def get_age_in_months(birth_date: Union[str, date], at: datetime, tz=None) -> float:
    """
    Whole calendar months from birth to the local date of `at`, minus 0.2 when
    the day of month has not come round yet. Never negative.
    """
    birth = parse_date(birth_date)
    today = to_local(at, resolve_timezone(tz)).date()
    delta = relativedelta(today, birth)
    months = delta.years * 12 + delta.months
    if today.day < birth.day:
        months -= 0.2
    return max(0.0, months)


def get_age_baseline(birth_date: Union[str, date], at: datetime, tz=None) -> AgeBaseline:
    """Bucket containing the age at `at`; ages past every bucket use the oldest one."""
    months = get_age_in_months(birth_date, at, tz)
    for baseline in AGE_BASELINES:
        if baseline.contains_age(months):
            return baseline
    return AGE_BASELINES[-1]
