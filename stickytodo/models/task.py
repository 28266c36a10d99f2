"""Task data model for StickyToDo."""

import re
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from stickytodo.local_calendar import LocalCalendar, get_calendar


def normalize_token(value: str) -> str:
    """Fold an enum-ish token so `nextAction`, `next-action` and `next_action` compare equal."""
    return re.sub(r"[\s_\-]", "", value or "").lower()


class TaskType(str, Enum):
    """Two-tier item type: lightweight notes and full GTD tasks."""
    NOTE = "note"
    TASK = "task"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class TaskStatus(str, Enum):
    """GTD workflow status."""
    INBOX = "inbox"
    NEXT_ACTION = "next_action"
    WAITING = "waiting"
    SOMEDAY = "someday"
    COMPLETED = "completed"

    @property
    def display_name(self) -> str:
        return _STATUS_DISPLAY_NAMES[self]

    @property
    def is_active(self) -> bool:
        return self != TaskStatus.COMPLETED

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["TaskStatus"]:
        """Lenient lookup by value or name; None when unrecognised."""
        token = normalize_token(value or "")
        for status in cls:
            if normalize_token(status.value) == token:
                return status
        return None


_STATUS_DISPLAY_NAMES = {
    TaskStatus.INBOX: "Inbox",
    TaskStatus.NEXT_ACTION: "Next Action",
    TaskStatus.WAITING: "Waiting For",
    TaskStatus.SOMEDAY: "Someday/Maybe",
    TaskStatus.COMPLETED: "Completed",
}


class Priority(str, Enum):
    """Task priority level."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def sort_order(self) -> int:
        """Higher number = higher priority."""
        return {Priority.LOW: 1, Priority.MEDIUM: 2, Priority.HIGH: 3}[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Priority"]:
        token = normalize_token(value or "")
        for priority in cls:
            if priority.value == token:
                return priority
        return None


class Tag(BaseModel):
    """A named tag attached to a task."""

    name: str = Field(..., description="Tag name (e.g. 'urgent')")
    color: Optional[str] = Field(None, description="Hex color for display")


class Task(BaseModel):
    """Snapshot of a task as consumed by the query and rule engine."""

    id: str = Field(..., description="Unique task identifier")
    type: TaskType = Field(TaskType.TASK, description="Note or task")
    title: str = Field(..., description="Task title")
    notes: str = Field("", description="Markdown notes")
    status: TaskStatus = Field(TaskStatus.INBOX, description="GTD status")
    project: Optional[str] = Field(None, description="Project name")
    context: Optional[str] = Field(None, description="Context (e.g. '@computer')")
    flagged: bool = Field(False, description="Whether the task is flagged")
    priority: Priority = Field(Priority.MEDIUM, description="Priority level")
    due: Optional[datetime] = Field(None, description="Due date")
    defer: Optional[datetime] = Field(None, description="Hidden until this date")
    effort: Optional[int] = Field(None, description="Estimated effort in minutes")
    tags: List[Tag] = Field(default_factory=list, description="Tags on this task")
    parent_id: Optional[str] = Field(None, description="Parent task id for subtasks")
    subtask_ids: List[str] = Field(default_factory=list, description="Ids of child tasks")
    attachments: List[str] = Field(default_factory=list, description="Attachment file names")
    created: datetime = Field(..., description="Creation timestamp")
    modified: datetime = Field(..., description="Last modification timestamp")

    @property
    def tag_names(self) -> List[str]:
        return [t.name for t in self.tags]

    @property
    def is_subtask(self) -> bool:
        return self.parent_id is not None

    @property
    def has_subtasks(self) -> bool:
        return bool(self.subtask_ids)

    @property
    def has_attachments(self) -> bool:
        return bool(self.attachments)

    def is_deferred(self, now: datetime, calendar: Optional[LocalCalendar] = None) -> bool:
        """Defer date lies strictly after `now`."""
        if self.defer is None:
            return False
        cal = get_calendar(calendar)
        return cal.timestamp(self.defer) > cal.timestamp(now)

    def is_overdue(self, now: datetime, calendar: Optional[LocalCalendar] = None) -> bool:
        """Due before `now` and not completed."""
        if self.due is None:
            return False
        cal = get_calendar(calendar)
        return cal.timestamp(self.due) < cal.timestamp(now) and self.status != TaskStatus.COMPLETED

    def is_due_this_week(self, now: datetime, calendar: Optional[LocalCalendar] = None) -> bool:
        """Due within [now, now + 7 days]."""
        if self.due is None:
            return False
        cal = get_calendar(calendar)
        start = cal.localize(now)
        due = cal.localize(self.due)
        return start <= due <= start + timedelta(days=7)

    def matches_search(self, query: str) -> bool:
        """Case-insensitive substring match over title, notes, project and context."""
        needle = query.lower()
        fields = [self.title, self.notes, self.project or "", self.context or ""]
        return any(needle in f.lower() for f in fields)
