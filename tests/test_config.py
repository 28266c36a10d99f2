"""Tests for environment-driven settings and the local calendar."""

import pytest
from datetime import datetime, timezone
from dateutil import tz

from stickytodo.config import load_settings, parse_first_weekday
from stickytodo.local_calendar import LocalCalendar, resolve_zone


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("STICKYTODO_TIME_ZONE", "STICKYTODO_FIRST_WEEKDAY", "STICKYTODO_DUE_SOON_DAYS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        settings = load_settings()
        assert settings.time_zone is None
        assert settings.first_weekday == 6
        assert settings.due_soon_days == 3
        assert settings.log_level == "INFO"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("STICKYTODO_TIME_ZONE", "Europe/Berlin")
        monkeypatch.setenv("STICKYTODO_FIRST_WEEKDAY", "Monday")
        monkeypatch.setenv("STICKYTODO_DUE_SOON_DAYS", "5")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.time_zone == "Europe/Berlin"
        assert settings.first_weekday == 0
        assert settings.due_soon_days == 5
        assert settings.log_level == "DEBUG"

    def test_invalid_days_falls_back(self, monkeypatch):
        monkeypatch.setenv("STICKYTODO_DUE_SOON_DAYS", "soon")
        assert load_settings().due_soon_days == 3

    def test_invalid_log_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert load_settings().log_level == "INFO"

    @pytest.mark.parametrize("value,expected", [
        ("sunday", 6),
        ("MON", 0),
        ("sat", 5),
        ("2", 2),
        ("mo", 6),
        ("funday", 6),
        (None, 6),
    ])
    def test_parse_first_weekday(self, value, expected):
        assert parse_first_weekday(value) == expected


class TestLocalCalendar:

    def test_unknown_zone_falls_back_to_local(self):
        assert resolve_zone("Not/AZone") == tz.tzlocal()

    def test_from_settings_explicit_values(self):
        cal = LocalCalendar.from_settings(time_zone="UTC", first_weekday="monday")
        assert cal.first_weekday == 0
        assert cal.localize(datetime(2024, 5, 15, 12, 0)).utcoffset().total_seconds() == 0

    def test_localize_naive_and_aware(self):
        cal = LocalCalendar(zone=tz.gettz("America/New_York"))
        naive = cal.localize(datetime(2024, 5, 15, 12, 0))
        assert naive.hour == 12
        aware = cal.localize(datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc))
        assert aware.hour == 8

    def test_start_of_week(self, calendar):
        assert calendar.start_of_week(datetime(2024, 5, 15, 10, 0)) == datetime(2024, 5, 12).date()
        assert calendar.start_of_week(datetime(2024, 5, 12, 0, 0)) == datetime(2024, 5, 12).date()
