"""
Rule-based coaching tips comparing recent sessions with the learned pattern.
"""

from datetime import datetime
from statistics import pstdev
from typing import Iterable, List, Optional

from ..models import CoachSeverity
from ..schemas import CoachInsight, LearnerState
from ..scheduling.constraints.sleep_constraints import is_likely_night_sleep, is_valid_wake_window
from ..scheduling.utils.session_utils import session_minutes
from ..scheduling.utils.stats import mean
from ..time_utils import as_utc, minutes_between, resolve_timezone, utc_now

# Daytime naps considered by the coach (minutes)
COACH_MIN_NAP_MINUTES = 15
COACH_MAX_NAP_MINUTES = 240
SHORT_NAP_MINUTES = 40

LOW_RATIO = 0.7
HIGH_RATIO = 1.3
VARIABLE_WAKE_STD_MINUTES = 60

INSIGHT_TEXT = {
    "coach_no_data": (
        CoachSeverity.INFO, "Not enough data yet",
        "Log a few days of naps and nighttime sleep so I can spot patterns and tailor schedules.",
        ["no_data"],
    ),
    "coach_no_naps": (
        CoachSeverity.INFO, "No daytime naps logged",
        "I only see nighttime or very short stretches. Add daytime naps so I can estimate wake windows and nap length.",
        ["no_naps"],
    ),
    "coach_short_naps": (
        CoachSeverity.WARN, "Naps are running short",
        "Recent naps are much shorter than the pattern I learned. This can be a sign of overtiredness "
        "or too-long wake windows before naps.",
        ["short_naps", "overtired"],
    ),
    "coach_long_naps": (
        CoachSeverity.TIP, "Naps are on the long side",
        "Recent naps are longer than your usual pattern. That can be fine, but if bedtime is drifting later, "
        "consider gently waking from very long naps.",
        ["long_naps"],
    ),
    "coach_long_wake": (
        CoachSeverity.WARN, "Wake windows may be too long",
        "Average time awake between naps is much longer than your usual pattern. This often leads to short, "
        "cranky naps and harder bedtimes.",
        ["wake_long", "overtired"],
    ),
    "coach_short_wake": (
        CoachSeverity.TIP, "Wake windows are on the short side",
        "Average wake windows are shorter than your usual pattern. If naps are still solid, this can be okay; "
        "otherwise you may have room to stretch awake time slightly.",
        ["wake_short"],
    ),
    "coach_many_short_naps": (
        CoachSeverity.WARN, "Lots of short naps",
        "There are several short naps in this period. That often means baby is playing catch-up on sleep. "
        "You may want to protect an early bedtime or shorter wake windows.",
        ["short_naps_cluster"],
    ),
    "coach_variable_wake": (
        CoachSeverity.TIP, "Wake windows are quite variable",
        "Time awake between naps is very up-and-down. That can make it harder for baby to settle into a "
        "predictable rhythm. A bit more consistency may help.",
        ["variable_wake"],
    ),
    "coach_all_good": (
        CoachSeverity.TIP, "Current pattern looks reasonable",
        "Based on recent naps and wake windows, I don't see any strong red flags. You can use the schedule "
        "and the wake-window offset to fine-tune as needed.",
        ["ok"],
    ),
}


def _insight(insight_id: str, now: datetime) -> CoachInsight:
    severity, title, message, tags = INSIGHT_TEXT[insight_id]
    return CoachInsight(id=insight_id, severity=severity, title=title, message=message, tags=tags, created_at=now)


def get_daytime_naps(sessions: Iterable, tz) -> List:
    naps = []
    for session in sessions:
        if getattr(session, "deleted", False):
            continue
        duration = session_minutes(session)
        if duration < COACH_MIN_NAP_MINUTES or duration > COACH_MAX_NAP_MINUTES:
            continue
        if is_likely_night_sleep(as_utc(session.start_at), as_utc(session.end_at), tz):
            continue
        naps.append(session)
    naps.sort(key=lambda s: as_utc(s.start_at))
    return naps


def get_wake_windows(ordered_naps: List) -> List[int]:
    windows = []
    for current, following in zip(ordered_naps, ordered_naps[1:]):
        gap = minutes_between(current.end_at, following.start_at)
        if is_valid_wake_window(gap):
            windows.append(gap)
    return windows


def compute_coach_insights(sessions: List, learner_state: Optional[LearnerState],
                           now: Optional[datetime] = None, tz=None) -> List[CoachInsight]:
    """Small set of human-readable tips; always returns at least one insight."""
    now = as_utc(now) if now is not None else utc_now()
    tz = resolve_timezone(tz)

    if not sessions or learner_state is None:
        return [_insight("coach_no_data", now)]

    naps = get_daytime_naps(sessions, tz)
    if not naps:
        return [_insight("coach_no_naps", now)]

    insights: List[CoachInsight] = []

    # Rule 1: nap length vs learned nap length
    nap_durations = [session_minutes(s) for s in naps]
    average_nap = mean(nap_durations)
    if average_nap < LOW_RATIO * learner_state.ewma_nap_length_min:
        insights.append(_insight("coach_short_naps", now))
    elif average_nap > HIGH_RATIO * learner_state.ewma_nap_length_min:
        insights.append(_insight("coach_long_naps", now))

    # Rule 2: wake windows vs learned wake window
    wake_windows = get_wake_windows(naps)
    average_wake = mean(wake_windows)
    if average_wake is not None:
        if average_wake > HIGH_RATIO * learner_state.ewma_wake_window_min:
            insights.append(_insight("coach_long_wake", now))
        elif average_wake < LOW_RATIO * learner_state.ewma_wake_window_min:
            insights.append(_insight("coach_short_wake", now))

    # Rule 3: cluster of short naps
    short_naps = [d for d in nap_durations if d < SHORT_NAP_MINUTES]
    if len(short_naps) >= 3 and len(naps) >= 4:
        insights.append(_insight("coach_many_short_naps", now))

    # Rule 4: erratic wake windows (population std)
    if len(wake_windows) >= 3 and pstdev(wake_windows) > VARIABLE_WAKE_STD_MINUTES:
        insights.append(_insight("coach_variable_wake", now))

    if not insights:
        insights.append(_insight("coach_all_good", now))

    return insights
