"""
Learner: turns recent sleep-session history into smoothed estimates of nap
length and wake window, with a confidence score.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple, Union

from ...schemas import LearnerConfig, LearnerState
from ...time_utils import as_utc, minutes_between, resolve_timezone, utc_now
from ..constraints.sleep_constraints import is_likely_night_sleep, is_valid_nap_duration, is_valid_wake_window
from ..core.constants import LEARNER_SCHEMA_VERSION
from ..scoring.confidence_scoring import calculate_learner_confidence
from ..utils.session_utils import session_minutes
from ..utils.stats import clamp
from .baseline import get_age_baseline
from .ewma import ewma

logger = logging.getLogger(__name__)

DEFAULT_LEARNER_CONFIG = LearnerConfig()


def select_learning_sessions(sessions: Iterable, now: datetime, config: LearnerConfig, tz) -> List:
    """
    Sessions the learner may use, sorted by start:
    not deleted, positive duration, ended within the lookback window, not night sleep.
    """
    cutoff = now - timedelta(days=config.lookback_days)
    selected = []
    for session in sessions:
        if getattr(session, "deleted", False):
            continue
        if session_minutes(session) <= 0:
            continue
        if as_utc(session.end_at) < cutoff:
            continue
        if is_likely_night_sleep(as_utc(session.start_at), as_utc(session.end_at), tz):
            continue
        selected.append(session)

    selected.sort(key=lambda s: as_utc(s.start_at))
    return selected


def collect_samples(ordered_sessions: List) -> Tuple[List[int], List[int]]:
    """
    Nap-duration samples from each session and wake-window samples from the gap
    between each adjacent pair. A session too short or long to be a nap sample
    still bounds its neighbouring gaps.
    """
    nap_samples: List[int] = []
    wake_samples: List[int] = []

    for i, session in enumerate(ordered_sessions):
        duration = session_minutes(session)
        if is_valid_nap_duration(duration):
            nap_samples.append(duration)

        if i < len(ordered_sessions) - 1:
            next_session = ordered_sessions[i + 1]
            gap = minutes_between(session.end_at, next_session.start_at)
            if is_valid_wake_window(gap):
                wake_samples.append(gap)

    return nap_samples, wake_samples


def compute_learner_state(birth_date: Union[str, date], sessions: Iterable, now: Optional[datetime] = None,
                          config: Optional[LearnerConfig] = None, tz=None) -> LearnerState:
    """
    Estimate nap length and wake window for the baby as of `now`.

    Estimates are EWMA-smoothed and clamped into the age baseline range; with
    no samples they fall back to the exact midpoint of that range.
    """
    now = as_utc(now) if now is not None else utc_now()
    config = config or DEFAULT_LEARNER_CONFIG
    tz = resolve_timezone(tz)

    recent = select_learning_sessions(sessions, now, config, tz)
    nap_samples, wake_samples = collect_samples(recent)

    baseline = get_age_baseline(birth_date, now, tz)

    nap_ewma = ewma(nap_samples, config.alpha_nap)
    wake_ewma = ewma(wake_samples, config.alpha_wake)

    if nap_ewma is not None:
        nap_length = clamp(nap_ewma, baseline.nap_length_min, baseline.nap_length_max)
    else:
        nap_length = baseline.nap_length_midpoint

    if wake_ewma is not None:
        wake_window = clamp(wake_ewma, baseline.wake_window_min, baseline.wake_window_max)
    else:
        wake_window = baseline.wake_window_midpoint

    confidence = calculate_learner_confidence(nap_samples, wake_samples, config.min_samples_for_high_confidence)

    logger.debug(
        f"Learner: {len(recent)} sessions, {len(nap_samples)} nap / {len(wake_samples)} wake samples, "
        f"baseline {baseline.id} -> nap {nap_length:.1f}m, wake {wake_window:.1f}m, confidence {confidence:.2f}"
    )

    return LearnerState(
        version=LEARNER_SCHEMA_VERSION,
        ewma_nap_length_min=nap_length,
        ewma_wake_window_min=wake_window,
        last_updated_at=now,
        confidence=confidence,
    )
