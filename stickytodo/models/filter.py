"""Fixed-field Filter used by boards and built-in perspectives.

Every field is optional; None means "no constraint on that field". Present
fields are combined with AND.
"""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, Field

from stickytodo.local_calendar import LocalCalendar, get_calendar
from stickytodo.models.task import Priority, TaskStatus, TaskType

_CRITERIA_FIELDS = (
    "type",
    "status",
    "project",
    "context",
    "flagged",
    "priority",
    "due_before",
    "due_after",
    "defer_after",
    "effort_max",
    "effort_min",
    "expression",
)


class Filter(BaseModel):
    """Conjunction of optional task criteria."""

    type: Optional[TaskType] = Field(None, description="Note or task")
    status: Optional[TaskStatus] = Field(None, description="Exact status")
    project: Optional[str] = Field(None, description="Exact project name")
    context: Optional[str] = Field(None, description="Exact context")
    flagged: Optional[bool] = Field(None, description="Flagged state")
    priority: Optional[Priority] = Field(None, description="Exact priority")
    due_before: Optional[datetime] = Field(None, description="Due on or before")
    due_after: Optional[datetime] = Field(None, description="Due on or after")
    defer_after: Optional[datetime] = Field(None, description="Deferred to on or after")
    effort_max: Optional[int] = Field(None, description="Effort <= this many minutes")
    effort_min: Optional[int] = Field(None, description="Effort >= this many minutes")
    expression: Optional[str] = Field(
        None,
        description="Saved advanced query text (stored only, never evaluated)",
    )

    @property
    def criteria_count(self) -> int:
        return sum(1 for name in _CRITERIA_FIELDS if getattr(self, name) is not None)

    @property
    def matches_all(self) -> bool:
        return self.criteria_count == 0

    # Presets

    @classmethod
    def inbox(cls) -> "Filter":
        return cls(status=TaskStatus.INBOX)

    @classmethod
    def next_actions(cls) -> "Filter":
        return cls(status=TaskStatus.NEXT_ACTION, type=TaskType.TASK)

    @classmethod
    def flagged_only(cls) -> "Filter":
        return cls(flagged=True)

    @classmethod
    def waiting(cls) -> "Filter":
        return cls(status=TaskStatus.WAITING)

    @classmethod
    def someday(cls) -> "Filter":
        return cls(status=TaskStatus.SOMEDAY)

    @classmethod
    def completed(cls) -> "Filter":
        return cls(status=TaskStatus.COMPLETED)

    @classmethod
    def high_priority_actions(cls) -> "Filter":
        return cls(status=TaskStatus.NEXT_ACTION, priority=Priority.HIGH)

    @classmethod
    def quick_wins(cls) -> "Filter":
        """Short, high priority next actions."""
        return cls(status=TaskStatus.NEXT_ACTION, priority=Priority.HIGH, effort_max=30)

    @classmethod
    def due_today(cls, now: datetime, calendar: Optional[LocalCalendar] = None) -> "Filter":
        """Due between the start of `now`'s local day and the start of the next day."""
        start = get_calendar(calendar).localize(now).replace(hour=0, minute=0, second=0, microsecond=0)
        return cls(due_after=start, due_before=start + timedelta(days=1))

    @classmethod
    def due_this_week(cls, now: datetime) -> "Filter":
        return cls(due_before=now + timedelta(days=7))

    @classmethod
    def overdue(cls, now: datetime) -> "Filter":
        return cls(status=TaskStatus.NEXT_ACTION, due_before=now)
