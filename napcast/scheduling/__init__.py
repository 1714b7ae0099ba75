"""
Napcast Scheduling Core

Pure, synchronous sleep-rhythm learner and nap schedule projection.
Given the same sessions, birth date, clock and configuration it returns the same output.
"""

from .learning.learner import compute_learner_state, DEFAULT_LEARNER_CONFIG
from .learning.baseline import AgeBaseline, AGE_BASELINES, get_age_baseline, get_age_in_months
from .learning.ewma import ewma
from .core.scheduler import NapScheduler, generate_schedule, shift_wake_window, DEFAULT_SCHEDULE_CONFIG

__version__ = "1.0.0"
