"""Napcast: learns an infant's sleep rhythm and projects naps, wind-downs and bedtime."""

__version__ = "1.0.0"
