"""Typed filter values, operators and single-predicate rules.

A FilterRule is one (property, operator, value) triple. Which operators make
sense for a property is described by `allowed_operators`; the table is advisory
and the evaluator does not enforce it.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Dict, FrozenSet, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class FilterProperty(str, Enum):
    """Task property a FilterRule can test."""
    TITLE = "title"
    NOTES = "notes"
    STATUS = "status"
    PRIORITY = "priority"
    CONTEXT = "context"
    PROJECT = "project"
    DUE_DATE = "due_date"
    DEFER_DATE = "defer_date"
    CREATED_DATE = "created_date"
    MODIFIED_DATE = "modified_date"
    EFFORT = "effort"
    FLAGGED = "flagged"
    HAS_SUBTASKS = "has_subtasks"
    IS_SUBTASK = "is_subtask"
    HAS_ATTACHMENTS = "has_attachments"
    TAGS = "tags"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def kind(self) -> "PropertyKind":
        return _PROPERTY_KINDS[self]


class FilterOperator(str, Enum):
    """Comparison applied by a FilterRule."""
    # String
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    # Numeric / date
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    # Boolean
    IS_TRUE = "is_true"
    IS_FALSE = "is_false"
    # Presence / windows
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    IS_WITHIN = "is_within"

    @property
    def display_name(self) -> str:
        return _OPERATOR_DISPLAY_NAMES[self]


_OPERATOR_DISPLAY_NAMES = {
    FilterOperator.CONTAINS: "contains",
    FilterOperator.NOT_CONTAINS: "does not contain",
    FilterOperator.EQUALS: "is",
    FilterOperator.NOT_EQUALS: "is not",
    FilterOperator.STARTS_WITH: "starts with",
    FilterOperator.ENDS_WITH: "ends with",
    FilterOperator.LESS_THAN: "is before",
    FilterOperator.LESS_THAN_OR_EQUAL: "is on or before",
    FilterOperator.GREATER_THAN: "is after",
    FilterOperator.GREATER_THAN_OR_EQUAL: "is on or after",
    FilterOperator.IS_TRUE: "is true",
    FilterOperator.IS_FALSE: "is false",
    FilterOperator.IS_EMPTY: "is empty",
    FilterOperator.IS_NOT_EMPTY: "is not empty",
    FilterOperator.IS_WITHIN: "is within",
}


class DateRange(str, Enum):
    """Named relative time window, resolved against a reference instant."""
    TODAY = "today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this_week"
    NEXT_WEEK = "next_week"
    THIS_MONTH = "this_month"
    NEXT_MONTH = "next_month"
    PAST = "past"
    FUTURE = "future"
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    NEXT_7_DAYS = "next_7_days"
    NEXT_30_DAYS = "next_30_days"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class PropertyKind(str, Enum):
    """Value family of a FilterProperty; drives evaluator dispatch."""
    TEXT = "text"
    EFFORT = "effort"
    DATE = "date"
    ENUM = "enum"
    BOOLEAN = "boolean"
    TAGS = "tags"


_PROPERTY_KINDS: Dict[FilterProperty, PropertyKind] = {
    FilterProperty.TITLE: PropertyKind.TEXT,
    FilterProperty.NOTES: PropertyKind.TEXT,
    FilterProperty.CONTEXT: PropertyKind.TEXT,
    FilterProperty.PROJECT: PropertyKind.TEXT,
    FilterProperty.STATUS: PropertyKind.ENUM,
    FilterProperty.PRIORITY: PropertyKind.ENUM,
    FilterProperty.DUE_DATE: PropertyKind.DATE,
    FilterProperty.DEFER_DATE: PropertyKind.DATE,
    FilterProperty.CREATED_DATE: PropertyKind.DATE,
    FilterProperty.MODIFIED_DATE: PropertyKind.DATE,
    FilterProperty.EFFORT: PropertyKind.EFFORT,
    FilterProperty.FLAGGED: PropertyKind.BOOLEAN,
    FilterProperty.HAS_SUBTASKS: PropertyKind.BOOLEAN,
    FilterProperty.IS_SUBTASK: PropertyKind.BOOLEAN,
    FilterProperty.HAS_ATTACHMENTS: PropertyKind.BOOLEAN,
    FilterProperty.TAGS: PropertyKind.TAGS,
}

_ALLOWED_OPERATORS: Dict[PropertyKind, FrozenSet[FilterOperator]] = {
    PropertyKind.TEXT: frozenset({
        FilterOperator.CONTAINS,
        FilterOperator.NOT_CONTAINS,
        FilterOperator.EQUALS,
        FilterOperator.NOT_EQUALS,
        FilterOperator.STARTS_WITH,
        FilterOperator.ENDS_WITH,
        FilterOperator.IS_EMPTY,
        FilterOperator.IS_NOT_EMPTY,
    }),
    PropertyKind.EFFORT: frozenset({
        FilterOperator.LESS_THAN,
        FilterOperator.LESS_THAN_OR_EQUAL,
        FilterOperator.GREATER_THAN,
        FilterOperator.GREATER_THAN_OR_EQUAL,
        FilterOperator.EQUALS,
        FilterOperator.NOT_EQUALS,
        FilterOperator.IS_EMPTY,
        FilterOperator.IS_NOT_EMPTY,
    }),
    PropertyKind.DATE: frozenset({
        FilterOperator.IS_WITHIN,
        FilterOperator.LESS_THAN,
        FilterOperator.LESS_THAN_OR_EQUAL,
        FilterOperator.GREATER_THAN,
        FilterOperator.GREATER_THAN_OR_EQUAL,
        FilterOperator.IS_EMPTY,
        FilterOperator.IS_NOT_EMPTY,
    }),
    PropertyKind.ENUM: frozenset({FilterOperator.EQUALS, FilterOperator.NOT_EQUALS}),
    PropertyKind.BOOLEAN: frozenset({FilterOperator.IS_TRUE, FilterOperator.IS_FALSE}),
    PropertyKind.TAGS: frozenset({
        FilterOperator.CONTAINS,
        FilterOperator.NOT_CONTAINS,
        FilterOperator.IS_EMPTY,
        FilterOperator.IS_NOT_EMPTY,
    }),
}

# Declared operator order, so UI lists are stable.
_OPERATOR_ORDER = list(FilterOperator)


def allowed_operators(prop: FilterProperty) -> List[FilterOperator]:
    """Operators a rule builder should offer for `prop`."""
    allowed = _ALLOWED_OPERATORS[prop.kind]
    return [op for op in _OPERATOR_ORDER if op in allowed]


def is_operator_allowed(prop: FilterProperty, operator: FilterOperator) -> bool:
    return operator in _ALLOWED_OPERATORS[prop.kind]


# Filter values: a closed union discriminated by `kind`.

class StringValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    value: str


class NumberValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    value: int


class DateValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["date"] = "date"
    value: datetime


class BooleanValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["boolean"] = "boolean"
    value: bool


class DateRangeValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["date_range"] = "date_range"
    value: DateRange


class StringListValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["string_list"] = "string_list"
    value: List[str]


FilterValue = Annotated[
    Union[StringValue, NumberValue, DateValue, BooleanValue, DateRangeValue, StringListValue],
    Field(discriminator="kind"),
]


class FilterRule(BaseModel):
    """One (property, operator, value) predicate."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Rule identifier")
    property: FilterProperty = Field(..., description="Task property to test")
    operator_type: FilterOperator = Field(..., description="Comparison to apply")
    value: FilterValue = Field(..., description="Value compared against")
