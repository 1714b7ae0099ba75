"""
Tests for age computation and age-baseline bucket lookup.
"""

from datetime import date

import pytest

from napcast.scheduling.learning.baseline import AGE_BASELINES, get_age_baseline, get_age_in_months
from tests.helpers import utc


class TestAgeInMonths:

    def test_whole_months_when_day_of_month_reached(self):
        assert get_age_in_months("2024-01-01", utc(2024, 7, 2)) == 6

    def test_small_downward_adjustment_before_birth_day_of_month(self):
        # 1 full month plus 24 days, day 10 < day 15
        assert get_age_in_months("2024-01-15", utc(2024, 3, 10)) == pytest.approx(0.8)

    def test_never_negative(self):
        assert get_age_in_months("2024-06-01", utc(2024, 1, 1)) == 0.0

    def test_accepts_date_objects(self):
        assert get_age_in_months(date(2024, 1, 1), utc(2024, 4, 1)) == 3

    def test_uses_local_calendar_date(self):
        # 02:00 UTC on Mar 15 is still Mar 14 in New York
        at = utc(2024, 3, 15, 2)
        assert get_age_in_months("2024-01-15", at) == 2
        assert get_age_in_months("2024-01-15", at, "America/New_York") == pytest.approx(0.8)

    def test_invalid_birth_date_raises(self):
        with pytest.raises(ValueError):
            get_age_in_months("not-a-date", utc(2024, 1, 1))


class TestAgeBaseline:

    def test_buckets_cover_zero_to_twenty_four_months(self):
        assert AGE_BASELINES[0].min_months == 0
        assert AGE_BASELINES[-1].max_months == 24
        for younger, older in zip(AGE_BASELINES, AGE_BASELINES[1:]):
            assert older.min_months == younger.max_months + 1

    def test_six_month_old(self):
        baseline = get_age_baseline("2024-01-01", utc(2024, 7, 2))
        assert baseline.id == "5_7m"
        assert (baseline.wake_window_min, baseline.wake_window_max) == (120, 150)
        assert (baseline.nap_length_min, baseline.nap_length_max) == (60, 90)

    def test_newborn(self):
        assert get_age_baseline("2024-07-01", utc(2024, 7, 2)).id == "0_2m"

    def test_fractional_age_between_buckets_stays_in_younger_bucket(self):
        # 3 months 25 days minus the adjustment -> 2.8 months
        assert get_age_in_months("2024-01-15", utc(2024, 5, 10)) == pytest.approx(2.8)
        assert get_age_baseline("2024-01-15", utc(2024, 5, 10)).id == "0_2m"

    def test_age_beyond_all_buckets_uses_oldest(self):
        baseline = get_age_baseline("2020-01-01", utc(2024, 7, 2))
        assert baseline is AGE_BASELINES[-1]

    def test_midpoints(self):
        baseline = get_age_baseline("2024-01-01", utc(2024, 7, 2))
        assert baseline.nap_length_midpoint == 75
        assert baseline.wake_window_midpoint == 135
