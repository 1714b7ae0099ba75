"""
Small numeric helpers.
"""

from statistics import stdev
from typing import Optional, Sequence


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def sample_std(values: Sequence[float]) -> Optional[float]:
    """Bessel-corrected standard deviation, or None for fewer than two values."""
    if len(values) < 2:
        return None
    return stdev(values)


def mean(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)
