"""Smart perspectives: combinable lists of FilterRules."""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from stickytodo.models.filter_rule import (
    BooleanValue,
    DateRange,
    DateRangeValue,
    FilterOperator,
    FilterProperty,
    FilterRule,
    NumberValue,
    StringValue,
)
from stickytodo.models.perspective import GroupBy, SortBy, SortDirection, ViewPolicy


class FilterLogic(str, Enum):
    """How a SmartPerspective combines its rules."""
    AND = "and"
    OR = "or"


class SmartPerspective(ViewPolicy):
    """Perspective driven by an ordered list of typed predicate rules."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Perspective identifier")
    name: str = Field(..., description="Display name")
    description: Optional[str] = Field(None, description="What this perspective shows")
    rules: List[FilterRule] = Field(default_factory=list, description="Predicate rules")
    logic: FilterLogic = Field(FilterLogic.AND, description="AND / OR combinator")
    icon: Optional[str] = Field(None, description="Sidebar icon")
    color: Optional[str] = Field(None, description="Sidebar color")
    is_built_in: bool = Field(False, description="System perspective")
    created: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    modified: datetime = Field(default_factory=datetime.now, description="Last modification timestamp")


def _rule(prop: FilterProperty, op: FilterOperator, value) -> FilterRule:
    return FilterRule(property=prop, operator_type=op, value=value)


def todays_focus() -> SmartPerspective:
    """Due today OR flagged OR next action."""
    return SmartPerspective(
        id="todays-focus",
        name="Today's Focus",
        description="Tasks due today or flagged next actions",
        rules=[
            _rule(FilterProperty.DUE_DATE, FilterOperator.IS_WITHIN, DateRangeValue(value=DateRange.TODAY)),
            _rule(FilterProperty.FLAGGED, FilterOperator.IS_TRUE, BooleanValue(value=True)),
            _rule(FilterProperty.STATUS, FilterOperator.EQUALS, StringValue(value="next_action")),
        ],
        logic=FilterLogic.OR,
        group_by=GroupBy.PRIORITY,
        sort_by=SortBy.PRIORITY,
        sort_direction=SortDirection.DESCENDING,
        icon="sun.max.fill",
        color="#FF9500",
        is_built_in=True,
    )


def quick_wins() -> SmartPerspective:
    """Effort <= 30 min AND high priority AND next action."""
    return SmartPerspective(
        id="quick-wins",
        name="Quick Wins",
        description="High priority tasks that take less than 30 minutes",
        rules=[
            _rule(FilterProperty.EFFORT, FilterOperator.LESS_THAN_OR_EQUAL, NumberValue(value=30)),
            _rule(FilterProperty.PRIORITY, FilterOperator.EQUALS, StringValue(value="high")),
            _rule(FilterProperty.STATUS, FilterOperator.EQUALS, StringValue(value="next_action")),
        ],
        logic=FilterLogic.AND,
        group_by=GroupBy.CONTEXT,
        sort_by=SortBy.EFFORT,
        sort_direction=SortDirection.ASCENDING,
        icon="bolt.fill",
        color="#FFCC00",
        is_built_in=True,
    )


def waiting_this_week() -> SmartPerspective:
    return SmartPerspective(
        id="waiting-this-week",
        name="Waiting This Week",
        description="Waiting tasks becoming available within 7 days",
        rules=[
            _rule(FilterProperty.STATUS, FilterOperator.EQUALS, StringValue(value="waiting")),
            _rule(FilterProperty.DEFER_DATE, FilterOperator.IS_WITHIN, DateRangeValue(value=DateRange.NEXT_7_DAYS)),
        ],
        logic=FilterLogic.AND,
        group_by=GroupBy.PROJECT,
        sort_by=SortBy.DEFER,
        sort_direction=SortDirection.ASCENDING,
        show_deferred=True,
        icon="clock.fill",
        color="#FF9500",
        is_built_in=True,
    )


def stale_tasks() -> SmartPerspective:
    # Rule set selects active tasks modified within the last 30 days, oldest first.
    return SmartPerspective(
        id="stale-tasks",
        name="Stale Tasks",
        description="Active tasks not touched in over 30 days",
        rules=[
            _rule(FilterProperty.MODIFIED_DATE, FilterOperator.IS_WITHIN, DateRangeValue(value=DateRange.LAST_30_DAYS)),
            _rule(FilterProperty.STATUS, FilterOperator.NOT_EQUALS, StringValue(value="completed")),
        ],
        logic=FilterLogic.AND,
        group_by=GroupBy.PROJECT,
        sort_by=SortBy.MODIFIED,
        sort_direction=SortDirection.ASCENDING,
        icon="exclamationmark.triangle.fill",
        color="#FF3B30",
        is_built_in=True,
    )


def no_context() -> SmartPerspective:
    return SmartPerspective(
        id="no-context",
        name="No Context",
        description="Next actions missing a context",
        rules=[
            _rule(FilterProperty.STATUS, FilterOperator.EQUALS, StringValue(value="next_action")),
            _rule(FilterProperty.CONTEXT, FilterOperator.IS_EMPTY, BooleanValue(value=False)),
        ],
        logic=FilterLogic.AND,
        group_by=GroupBy.PROJECT,
        sort_by=SortBy.PRIORITY,
        sort_direction=SortDirection.DESCENDING,
        icon="questionmark.circle.fill",
        color="#5856D6",
        is_built_in=True,
    )


def built_in_smart_perspectives() -> List[SmartPerspective]:
    return [todays_focus(), quick_wins(), waiting_this_week(), stale_tasks(), no_context()]
