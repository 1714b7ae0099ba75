"""
Confidence scoring for learner estimates and projected schedule blocks.
"""

from typing import Optional, Sequence

from ..core.constants import (
    MIN_SAMPLES_FOR_VARIANCE, VARIANCE_PENALTY_SCALE_MINUTES, MAX_VARIANCE_PENALTY,
    PROJECTED_DAY_FACTOR, CYCLE_DECAY_STEP, MAX_CYCLE_DECAY,
)
from ..utils.stats import clamp, sample_std


def calculate_variance_penalty(samples: Sequence[float]) -> float:
    """
    Penalty (0.0 - 0.6) for inconsistent samples: one full point per hour of
    sample standard deviation, capped. Fewer than three samples carry no penalty.
    """
    if len(samples) < MIN_SAMPLES_FOR_VARIANCE:
        return 0.0
    std = sample_std(samples)
    return clamp(std / VARIANCE_PENALTY_SCALE_MINUTES, 0.0, MAX_VARIANCE_PENALTY)


def calculate_learner_confidence(nap_samples: Sequence[float], wake_samples: Sequence[float],
                                 min_samples_for_high_confidence: int) -> float:
    """
    Confidence (0.0 - 1.0) in the learned estimates:
    sample sufficiency scaled down by the variance penalty of the pooled samples.
    """
    sample_count = min(len(nap_samples) + len(wake_samples), min_samples_for_high_confidence)
    base_confidence = sample_count / min_samples_for_high_confidence

    variance_penalty = calculate_variance_penalty(list(nap_samples) + list(wake_samples))

    return clamp(base_confidence * (1 - variance_penalty), 0.0, 1.0)


def attenuate_block_confidence(learner_confidence: float, is_today: bool, cycle_index: Optional[int] = None) -> float:
    """
    Confidence for a single projected block.
    Projected (non-today) days are less certain, and so are later nap cycles.
    """
    confidence = learner_confidence
    if not is_today:
        confidence *= PROJECTED_DAY_FACTOR
    if cycle_index is not None and cycle_index > 0:
        confidence *= 1 - min(cycle_index * CYCLE_DECAY_STEP, MAX_CYCLE_DECAY)
    return clamp(confidence, 0.0, 1.0)
