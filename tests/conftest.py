"""Pytest fixtures and configuration for StickyToDo tests."""

import pytest
import uuid
from datetime import datetime
from dateutil import tz
from fastapi.testclient import TestClient

from stickytodo.local_calendar import LocalCalendar
from stickytodo.models.task import Task, TaskStatus, TaskType, Priority


@pytest.fixture
def now():
    """Fixed reference instant: Wednesday 2024-05-15 10:00 (UTC wall clock)."""
    return datetime(2024, 5, 15, 10, 0)


@pytest.fixture
def calendar():
    """UTC calendar with weeks starting on Sunday."""
    return LocalCalendar(zone=tz.gettz("UTC"), first_weekday=6)


@pytest.fixture
def sample_task_base(now):
    """Base task data for creating test tasks.
    
    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": str(uuid.uuid4()),
        "type": TaskType.TASK,
        "title": "Test Task",
        "notes": "Test notes",
        "status": TaskStatus.NEXT_ACTION,
        "project": None,
        "context": None,
        "flagged": False,
        "priority": Priority.MEDIUM,
        "due": None,
        "defer": None,
        "effort": None,
        "tags": [],
        "created": datetime(2024, 5, 1, 9, 0),
        "modified": datetime(2024, 5, 10, 9, 0),
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def make_task(sample_task_base):
    """Factory for tasks with overridden fields and a fresh id."""
    def _make(**overrides):
        return Task(**{**sample_task_base, "id": str(uuid.uuid4()), **overrides})
    return _make


@pytest.fixture
def test_client(monkeypatch):
    """FastAPI test client pinned to a UTC, Sunday-first calendar."""
    monkeypatch.setenv("STICKYTODO_TIME_ZONE", "UTC")
    monkeypatch.setenv("STICKYTODO_FIRST_WEEKDAY", "sunday")
    from stickytodo.api.app import app
    return TestClient(app)
