"""Process settings loaded from the environment (and an optional .env file)."""

import os
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

# Telegram
BOT_TOKEN: str = os.getenv("BOT_TOKEN", "")

# Storage
DB_FILENAME: str = os.getenv("ST_DB_FILENAME", "smoke_tracker.db")

# Calendar-day boundaries (streaks, "today") are evaluated in this zone
TIMEZONE: ZoneInfo = ZoneInfo(os.getenv("ST_TIMEZONE", "UTC"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Craving timer countdown, seconds
CRAVING_TIMER_SECONDS: int = int(os.getenv("ST_CRAVING_TIMER_SECONDS", "300"))


def validate_config() -> None:
    """Validate required configuration"""
    if not BOT_TOKEN:
        raise RuntimeError("BOT_TOKEN env variable not set")
    if CRAVING_TIMER_SECONDS <= 0:
        raise RuntimeError("ST_CRAVING_TIMER_SECONDS must be positive")
