from typing import Optional, Sequence


def ewma(values: Sequence[float], alpha: float) -> Optional[float]:
    """
    Exponentially-weighted moving average of values, in the order given.
    The first sample seeds the average; returns None for an empty sequence.
    """
    if not values:
        return None
    smoothed = values[0]
    for value in values[1:]:
        smoothed = alpha * value + (1 - alpha) * smoothed
    return smoothed
