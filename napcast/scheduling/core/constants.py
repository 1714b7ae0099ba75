"""
Constants for the sleep learner and the schedule projection.
"""

from datetime import time

from ...models import BlockKind

LEARNER_SCHEMA_VERSION = 1

# Sessions whose midpoint falls in [18:00, 06:00) are night sleep
NIGHT_START_HOUR = 18
NIGHT_END_HOUR = 6

# Learnable sample ranges (minutes)
MIN_NAP_MINUTES = 20
MAX_NAP_MINUTES = 180
MAX_WAKE_WINDOW_MINUTES = 6 * 60

# Learner confidence
MIN_SAMPLES_FOR_VARIANCE = 3
VARIANCE_PENALTY_SCALE_MINUTES = 60.0
MAX_VARIANCE_PENALTY = 0.6

# Bedtime is snapped into this local window and marked with a short block
EARLIEST_BEDTIME = time(18, 0)
LATEST_BEDTIME = time(22, 0)
BEDTIME_MARKER_MINUTES = 10

# Block confidence attenuation
PROJECTED_DAY_FACTOR = 0.8
CYCLE_DECAY_STEP = 0.05
MAX_CYCLE_DECAY = 0.2

RATIONALES = {
    (BlockKind.WIND_DOWN, True): "Wind-down before nap based on current wake window (EWMA + age baseline).",
    (BlockKind.WIND_DOWN, False): "Wind-down before projected nap (tomorrow) using current patterns.",
    (BlockKind.NAP, True): "Nap time derived from learned nap length and wake window.",
    (BlockKind.NAP, False): "Projected nap for tomorrow using learned nap length and wake window.",
    (BlockKind.BEDTIME, True): "Bedtime anchored to last nap and wake window (evening range).",
    (BlockKind.BEDTIME, False): "Projected bedtime for tomorrow evening from current pattern.",
}
