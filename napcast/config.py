"""
Environment-backed settings for the Napcast API.
"""

import logging
import os
from functools import lru_cache

import pytz
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./napcast.db"


class Settings:
    """Process settings read from the environment (or a .env file)."""

    def __init__(self, database_url: str = None, timezone_name: str = None, log_level: str = None):
        self.database_url = database_url or os.getenv("NAPCAST_DATABASE_URL", DEFAULT_DATABASE_URL)
        self.timezone_name = timezone_name or os.getenv("NAPCAST_TIMEZONE", "UTC")
        self.log_level = (log_level or os.getenv("NAPCAST_LOG_LEVEL", "INFO")).upper()

    @property
    def timezone(self):
        """Timezone used for calendar days and local hours; unknown names fall back to UTC."""
        try:
            return pytz.timezone(self.timezone_name)
        except pytz.UnknownTimeZoneError:
            logger.warning(f"Unknown timezone '{self.timezone_name}', falling back to UTC")
            return pytz.UTC

    def __repr__(self):
        return f"Settings(database_url={self.database_url!r}, timezone={self.timezone_name!r}, log_level={self.log_level!r})"


@lru_cache
def get_settings() -> Settings:
    return Settings()
