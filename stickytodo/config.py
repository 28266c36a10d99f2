"""Runtime configuration for StickyToDo.

Settings come from the environment (optionally via a local `.env` file) and are
read at call time so tests can override them with monkeypatch.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Python weekday numbering: Monday=0 ... Sunday=6
WEEKDAY_NAMES = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

DEFAULT_FIRST_WEEKDAY = "sunday"
DEFAULT_DUE_SOON_DAYS = 3
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    """Resolved engine settings."""

    time_zone: Optional[str]
    first_weekday: int
    due_soon_days: int
    log_level: str


def parse_first_weekday(value: Optional[str]) -> int:
    """Map a weekday name (or 0-6 index) to a Python weekday number.

    Unrecognised values fall back to Sunday.
    """
    raw = (value or DEFAULT_FIRST_WEEKDAY).strip().lower()
    if raw.isdigit() and 0 <= int(raw) <= 6:
        return int(raw)
    for name, index in WEEKDAY_NAMES.items():
        if name.startswith(raw) and len(raw) >= 3:
            return index
    logger.warning(f"Unrecognised first weekday {value!r}, using {DEFAULT_FIRST_WEEKDAY}")
    return WEEKDAY_NAMES[DEFAULT_FIRST_WEEKDAY]


def load_settings() -> Settings:
    """Read settings from the environment."""
    time_zone = os.getenv("STICKYTODO_TIME_ZONE", "").strip() or None

    raw_days = os.getenv("STICKYTODO_DUE_SOON_DAYS", str(DEFAULT_DUE_SOON_DAYS))
    try:
        due_soon_days = int(raw_days)
    except ValueError:
        logger.warning(f"Invalid STICKYTODO_DUE_SOON_DAYS {raw_days!r}, using {DEFAULT_DUE_SOON_DAYS}")
        due_soon_days = DEFAULT_DUE_SOON_DAYS

    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if log_level not in LOG_LEVELS:
        logger.warning(f"Invalid LOG_LEVEL {log_level!r}, using {DEFAULT_LOG_LEVEL}")
        log_level = DEFAULT_LOG_LEVEL

    return Settings(
        time_zone=time_zone,
        first_weekday=parse_first_weekday(os.getenv("STICKYTODO_FIRST_WEEKDAY")),
        due_soon_days=due_soon_days,
        log_level=log_level,
    )
