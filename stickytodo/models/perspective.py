"""List-view perspective: a Filter plus grouping, sorting and visibility."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from stickytodo.models.filter import Filter
from stickytodo.models.task import TaskType


class GroupBy(str, Enum):
    NONE = "none"
    CONTEXT = "context"
    PROJECT = "project"
    STATUS = "status"
    PRIORITY = "priority"
    DUE_DATE = "due_date"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class SortBy(str, Enum):
    TITLE = "title"
    CREATED = "created"
    MODIFIED = "modified"
    DUE = "due"
    DEFER = "defer"
    PRIORITY = "priority"
    STATUS = "status"
    EFFORT = "effort"

    @property
    def display_name(self) -> str:
        return {
            SortBy.DUE: "Due Date",
            SortBy.DEFER: "Defer Date",
        }.get(self, self.value.capitalize())


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class ViewPolicy(BaseModel):
    """Grouping, sorting and visibility shared by both perspective kinds."""

    group_by: GroupBy = Field(GroupBy.NONE, description="How to group tasks")
    sort_by: SortBy = Field(SortBy.CREATED, description="How to sort tasks")
    sort_direction: SortDirection = Field(SortDirection.ASCENDING, description="Sort direction")
    show_completed: bool = Field(False, description="Include completed tasks")
    show_deferred: bool = Field(False, description="Include tasks deferred into the future")


class Perspective(ViewPolicy):
    """Saved list view over a fixed-field Filter."""

    id: str = Field(..., description="Perspective identifier")
    name: str = Field(..., description="Display name")
    filter: Filter = Field(default_factory=Filter, description="Filter criteria")
    icon: Optional[str] = Field(None, description="Sidebar icon")
    color: Optional[str] = Field(None, description="Sidebar color")
    is_built_in: bool = Field(False, description="System perspective")
    is_visible: bool = Field(True, description="Shown in the sidebar")
    order: Optional[int] = Field(None, description="Sidebar position")

    @classmethod
    def inbox(cls) -> "Perspective":
        return cls(
            id="inbox",
            name="Inbox",
            filter=Filter.inbox(),
            sort_by=SortBy.CREATED,
            sort_direction=SortDirection.DESCENDING,
            icon="📥",
            color="blue",
            is_built_in=True,
            order=0,
        )

    @classmethod
    def next_actions(cls) -> "Perspective":
        return cls(
            id="next-actions",
            name="Next Actions",
            filter=Filter.next_actions(),
            group_by=GroupBy.CONTEXT,
            sort_by=SortBy.PRIORITY,
            sort_direction=SortDirection.DESCENDING,
            icon="▶️",
            color="green",
            is_built_in=True,
            order=1,
        )

    @classmethod
    def flagged(cls) -> "Perspective":
        return cls(
            id="flagged",
            name="Flagged",
            filter=Filter.flagged_only(),
            sort_by=SortBy.DUE,
            sort_direction=SortDirection.ASCENDING,
            icon="⭐",
            color="yellow",
            is_built_in=True,
            order=2,
        )

    @classmethod
    def due_soon(cls, now: datetime) -> "Perspective":
        """Items due within 7 days of `now`."""
        return cls(
            id="due-soon",
            name="Due Soon",
            filter=Filter.due_this_week(now),
            group_by=GroupBy.DUE_DATE,
            sort_by=SortBy.DUE,
            sort_direction=SortDirection.ASCENDING,
            icon="📅",
            color="orange",
            is_built_in=True,
            order=3,
        )

    @classmethod
    def waiting_for(cls) -> "Perspective":
        return cls(
            id="waiting-for",
            name="Waiting For",
            filter=Filter.waiting(),
            group_by=GroupBy.PROJECT,
            sort_by=SortBy.CREATED,
            sort_direction=SortDirection.DESCENDING,
            icon="⏳",
            color="orange",
            is_built_in=True,
            order=4,
        )

    @classmethod
    def someday(cls) -> "Perspective":
        return cls(
            id="someday-maybe",
            name="Someday/Maybe",
            filter=Filter.someday(),
            group_by=GroupBy.PROJECT,
            sort_by=SortBy.CREATED,
            sort_direction=SortDirection.DESCENDING,
            icon="💭",
            color="purple",
            is_built_in=True,
            order=5,
        )

    @classmethod
    def all_active(cls) -> "Perspective":
        return cls(
            id="all-active",
            name="All Active",
            filter=Filter(type=TaskType.TASK),
            group_by=GroupBy.PROJECT,
            sort_by=SortBy.PRIORITY,
            sort_direction=SortDirection.DESCENDING,
            icon="📋",
            color="blue",
            is_built_in=True,
            order=6,
        )


def built_in_perspectives(now: datetime) -> List[Perspective]:
    """System perspectives in sidebar order."""
    return [
        Perspective.inbox(),
        Perspective.next_actions(),
        Perspective.flagged(),
        Perspective.due_soon(now),
        Perspective.waiting_for(),
        Perspective.someday(),
        Perspective.all_active(),
    ]
