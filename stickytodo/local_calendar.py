"""Local calendar used for every day, week and month boundary.

A LocalCalendar pairs a time zone with the first day of the week. Naive
datetimes are treated as wall-clock times in that zone; aware datetimes are
converted into it. All instant comparisons in the engine go through
`localize` so naive and aware values never meet directly.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from dateutil import tz

from stickytodo.config import load_settings, parse_first_weekday

logger = logging.getLogger(__name__)


def resolve_zone(time_zone: Optional[str]) -> tzinfo:
    """Resolve an IANA zone name, falling back to the system local zone."""
    if not time_zone:
        return tz.tzlocal()
    zone = tz.gettz(time_zone)
    if zone is None:
        logger.warning(f"Unknown time zone {time_zone!r}, using system local time")
        return tz.tzlocal()
    return zone


@dataclass(frozen=True)
class LocalCalendar:
    """Time zone plus week start for calendar-aware comparisons."""

    zone: tzinfo
    first_weekday: int = 6  # Sunday

    @classmethod
    def from_settings(
        cls,
        time_zone: Optional[str] = None,
        first_weekday: Optional[str] = None,
    ) -> "LocalCalendar":
        """Build a calendar from explicit values, else from the environment."""
        settings = load_settings()
        zone = resolve_zone(time_zone if time_zone is not None else settings.time_zone)
        weekday = (
            parse_first_weekday(first_weekday)
            if first_weekday is not None
            else settings.first_weekday
        )
        return cls(zone=zone, first_weekday=weekday)

    def now(self) -> datetime:
        return datetime.now(self.zone)

    def localize(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=self.zone)
        return value.astimezone(self.zone)

    def resolve_now(self, now: Optional[datetime]) -> datetime:
        """Localized reference instant, reading the clock only when none is given."""
        return self.localize(now) if now is not None else self.now()

    def day_of(self, value: datetime) -> date:
        return self.localize(value).date()

    def start_of_week(self, value: datetime) -> date:
        day = self.day_of(value)
        offset = (day.weekday() - self.first_weekday) % 7
        return day - timedelta(days=offset)

    def timestamp(self, value: datetime) -> float:
        return self.localize(value).timestamp()


def get_calendar(calendar: Optional[LocalCalendar] = None) -> LocalCalendar:
    """Return the given calendar or one built from current settings."""
    return calendar if calendar is not None else LocalCalendar.from_settings()
