"""
Scheduler: projects a learner state forward into nap, wind-down and bedtime
blocks across a multi-day horizon.
"""

import logging
from datetime import datetime, timedelta
from itertools import count
from typing import Iterable, List, Optional

from ...models import BlockKind
from ...schemas import LearnerState, ScheduleBlock, ScheduleConfig
from ...time_utils import add_minutes, as_utc, resolve_timezone, to_local, utc_now
from ..constraints.sleep_constraints import clamp_to_bedtime_window
from ..scoring.confidence_scoring import attenuate_block_confidence
from ..utils.session_utils import resolve_anchor
from .constants import BEDTIME_MARKER_MINUTES, RATIONALES
from .day_window import DayWindow

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE_CONFIG = ScheduleConfig()

# ================================
# INITIALIZATION & SETUP
# ================================

class NapScheduler:
    """
    Simulates nap cycles day by day, starting from the anchor (the end of the
    current or most recent sleep), and emits ScheduleBlocks.
    Block ids come from a counter local to each generate() call.
    """
    def __init__(self, learner_state: LearnerState, config: Optional[ScheduleConfig] = None, tz=None):
        self.learner_state = learner_state
        self.config = config or DEFAULT_SCHEDULE_CONFIG
        self.tz = resolve_timezone(tz)
        self.wake_window_min = learner_state.ewma_wake_window_min
        self.nap_length_min = learner_state.ewma_nap_length_min
        self._ids = count(1)

    def _get_days_in_horizon(self, now: datetime) -> List[DayWindow]:
        """Local calendar days covered by the horizon, today first."""
        today = to_local(now, self.tz).date()
        return [
            DayWindow(today + timedelta(days=offset), self.tz, offset)
            for offset in range(self.config.horizon_days)
        ]

# ================================
# CORE SCHEDULING LOGIC
# ================================

    def generate(self, sessions: Iterable, now: Optional[datetime] = None) -> List[ScheduleBlock]:
        """Blocks for every day in the horizon, sorted by start."""
        now = as_utc(now) if now is not None else utc_now()
        self._ids = count(1)

        anchor = resolve_anchor(sessions, now)
        logger.debug(f"Schedule anchor {anchor.isoformat()} (now {now.isoformat()})")

        blocks: List[ScheduleBlock] = []
        for window in self._get_days_in_horizon(now):
            cursor = window.clamp_start(anchor)
            day_blocks = self._simulate_day(window, cursor)
            logger.debug(f"{window}: {len(day_blocks)} blocks from cursor {cursor.isoformat()}")
            blocks.extend(day_blocks)

        blocks.sort(key=lambda block: block.start_at)
        return blocks

    def _simulate_day(self, window: DayWindow, cursor: datetime) -> List[ScheduleBlock]:
        """Run up to max_nap_cycles_per_day wake/nap cycles, then place bedtime."""
        blocks: List[ScheduleBlock] = []

        for cycle_index in range(self.config.max_nap_cycles_per_day):
            nap_start = add_minutes(cursor, self.wake_window_min)
            if nap_start >= window.end:
                break

            nap_end = add_minutes(nap_start, self.nap_length_min)
            wind_down_start = window.clamp_start(add_minutes(nap_start, -self.config.wind_down_lead_min))

            if wind_down_start < nap_start:
                blocks.append(self._make_block(BlockKind.WIND_DOWN, wind_down_start, nap_start, window.is_today, cycle_index))

            if nap_end > window.end:
                # Clamp the last nap to the day and stop cycling
                blocks.append(self._make_block(BlockKind.NAP, nap_start, window.end, window.is_today, cycle_index))
                cursor = window.end
                break

            blocks.append(self._make_block(BlockKind.NAP, nap_start, nap_end, window.is_today, cycle_index))
            cursor = nap_end

        bedtime = self._project_bedtime(window, cursor)
        if bedtime is not None:
            blocks.append(bedtime)

        return blocks

    def _project_bedtime(self, window: DayWindow, cursor: datetime) -> Optional[ScheduleBlock]:
        """Last wake window stretched by bedtime_wake_factor, snapped into the evening range."""
        candidate = add_minutes(cursor, self.wake_window_min * self.config.bedtime_wake_factor)
        bedtime_start = clamp_to_bedtime_window(candidate, window.day, self.tz)

        if not window.strictly_contains(bedtime_start):
            return None

        bedtime_end = add_minutes(bedtime_start, BEDTIME_MARKER_MINUTES)
        return self._make_block(BlockKind.BEDTIME, bedtime_start, bedtime_end, window.is_today)

# ================================
# BLOCK CREATION
# ================================

    def _next_block_id(self, kind: BlockKind) -> str:
        return f"sched_{kind.value}_{next(self._ids)}"

    def _make_block(self, kind: BlockKind, start: datetime, end: datetime, is_today: bool,
                    cycle_index: Optional[int] = None) -> ScheduleBlock:
        return ScheduleBlock(
            id=self._next_block_id(kind),
            kind=kind,
            start_at=start,
            end_at=end,
            confidence=attenuate_block_confidence(self.learner_state.confidence, is_today, cycle_index),
            rationale=RATIONALES[(kind, is_today)],
        )

    def __repr__(self):
        return (f"NapScheduler(nap {self.nap_length_min:.0f}m, wake {self.wake_window_min:.0f}m, "
                f"horizon {self.config.horizon_days}d, tz {self.tz})")


def generate_schedule(learner_state: LearnerState, sessions: Iterable, now: Optional[datetime] = None,
                      config: Optional[ScheduleConfig] = None, tz=None) -> List[ScheduleBlock]:
    """Project learner_state forward from the latest sleep in sessions."""
    return NapScheduler(learner_state, config, tz).generate(sessions, now)


def shift_wake_window(learner_state: LearnerState, offset_min: float) -> LearnerState:
    """What-if copy of a learner state with the wake window moved by offset_min (at least one minute)."""
    if not offset_min:
        return learner_state
    shifted = max(1.0, learner_state.ewma_wake_window_min + offset_min)
    return learner_state.model_copy(update={"ewma_wake_window_min": shifted})
