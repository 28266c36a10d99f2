"""Predicate evaluation for single FilterRules.

Dispatches on the rule's property family. Combinations that make no sense
(wrong value variant, operator foreign to the property) evaluate to False
rather than raising.
"""

from datetime import datetime
from typing import List, Optional

from stickytodo.engine.date_ranges import is_within
from stickytodo.local_calendar import LocalCalendar, get_calendar
from stickytodo.models.filter_rule import (
    BooleanValue,
    DateRangeValue,
    DateValue,
    FilterOperator,
    FilterProperty,
    FilterRule,
    FilterValue,
    NumberValue,
    PropertyKind,
    StringListValue,
    StringValue,
)
from stickytodo.models.task import Task, normalize_token

_OPTIONAL_TEXT = (FilterProperty.CONTEXT, FilterProperty.PROJECT)


def evaluate_rule(
    rule: FilterRule,
    task: Task,
    now: Optional[datetime] = None,
    calendar: Optional[LocalCalendar] = None,
) -> bool:
    """Evaluate one FilterRule against a task.

    Args:
        rule: Rule to evaluate
        task: Task snapshot
        now: Reference instant for date windows
        calendar: Calendar for date boundaries

    Returns:
        True if the task satisfies the rule
    """
    prop = rule.property
    op = rule.operator_type
    value = rule.value
    kind = prop.kind

    if kind == PropertyKind.TEXT:
        text = _text_value(task, prop)
        if prop in _OPTIONAL_TEXT:
            return _match_optional_text(text, op, value)
        return _match_text(text, op, value)
    if kind == PropertyKind.ENUM:
        stored = task.status.value if prop == FilterProperty.STATUS else task.priority.value
        return _match_token(stored, op, value)
    if kind == PropertyKind.DATE:
        return _match_date(_date_value(task, prop), op, value, now, calendar)
    if kind == PropertyKind.EFFORT:
        return _match_number(task.effort, op, value)
    if kind == PropertyKind.BOOLEAN:
        return _match_boolean(_bool_value(task, prop), op, value)
    if kind == PropertyKind.TAGS:
        return _match_tags(task.tag_names, op, value)
    return False


def _text_value(task: Task, prop: FilterProperty) -> Optional[str]:
    return {
        FilterProperty.TITLE: task.title,
        FilterProperty.NOTES: task.notes,
        FilterProperty.CONTEXT: task.context,
        FilterProperty.PROJECT: task.project,
    }[prop]


def _date_value(task: Task, prop: FilterProperty) -> Optional[datetime]:
    return {
        FilterProperty.DUE_DATE: task.due,
        FilterProperty.DEFER_DATE: task.defer,
        FilterProperty.CREATED_DATE: task.created,
        FilterProperty.MODIFIED_DATE: task.modified,
    }[prop]


def _bool_value(task: Task, prop: FilterProperty) -> bool:
    return {
        FilterProperty.FLAGGED: task.flagged,
        FilterProperty.HAS_SUBTASKS: task.has_subtasks,
        FilterProperty.IS_SUBTASK: task.is_subtask,
        FilterProperty.HAS_ATTACHMENTS: task.has_attachments,
    }[prop]


def _match_text(text: str, op: FilterOperator, value: FilterValue) -> bool:
    """Case-insensitive string comparison."""
    if not isinstance(value, StringValue):
        return False
    if op == FilterOperator.IS_EMPTY:
        return text == ""
    if op == FilterOperator.IS_NOT_EMPTY:
        return text != ""

    haystack = text.lower()
    needle = value.value.lower()
    if op == FilterOperator.CONTAINS:
        return needle in haystack
    if op == FilterOperator.NOT_CONTAINS:
        return needle not in haystack
    if op == FilterOperator.EQUALS:
        return haystack == needle
    if op == FilterOperator.NOT_EQUALS:
        return haystack != needle
    if op == FilterOperator.STARTS_WITH:
        return haystack.startswith(needle)
    if op == FilterOperator.ENDS_WITH:
        return haystack.endswith(needle)
    return False


def _match_optional_text(text: Optional[str], op: FilterOperator, value: FilterValue) -> bool:
    # An absent field only satisfies emptiness-shaped operators.
    if text is None:
        return op in (FilterOperator.IS_EMPTY, FilterOperator.IS_FALSE)
    return _match_text(text, op, value)


def _match_token(stored: str, op: FilterOperator, value: FilterValue) -> bool:
    if not isinstance(value, StringValue):
        return False
    same = normalize_token(stored) == normalize_token(value.value)
    if op == FilterOperator.EQUALS:
        return same
    if op == FilterOperator.NOT_EQUALS:
        return not same
    return False


def _match_date(
    stored: Optional[datetime],
    op: FilterOperator,
    value: FilterValue,
    now: Optional[datetime],
    calendar: Optional[LocalCalendar],
) -> bool:
    if op == FilterOperator.IS_EMPTY:
        return stored is None
    if op == FilterOperator.IS_NOT_EMPTY:
        return stored is not None
    if stored is None:
        return False

    if op == FilterOperator.IS_WITHIN:
        if not isinstance(value, DateRangeValue):
            return False
        return is_within(stored, value.value, now, calendar)

    if not isinstance(value, DateValue):
        return False
    cal = get_calendar(calendar)
    left = cal.timestamp(stored)
    right = cal.timestamp(value.value)
    if op == FilterOperator.LESS_THAN:
        return left < right
    if op == FilterOperator.LESS_THAN_OR_EQUAL:
        return left <= right
    if op == FilterOperator.GREATER_THAN:
        return left > right
    if op == FilterOperator.GREATER_THAN_OR_EQUAL:
        return left >= right
    return False


def _match_number(stored: Optional[int], op: FilterOperator, value: FilterValue) -> bool:
    if op == FilterOperator.IS_EMPTY:
        return stored is None
    if op == FilterOperator.IS_NOT_EMPTY:
        return stored is not None
    if stored is None or not isinstance(value, NumberValue):
        return False

    target = value.value
    if op == FilterOperator.LESS_THAN:
        return stored < target
    if op == FilterOperator.LESS_THAN_OR_EQUAL:
        return stored <= target
    if op == FilterOperator.GREATER_THAN:
        return stored > target
    if op == FilterOperator.GREATER_THAN_OR_EQUAL:
        return stored >= target
    if op == FilterOperator.EQUALS:
        return stored == target
    if op == FilterOperator.NOT_EQUALS:
        return stored != target
    return False


def _match_boolean(stored: bool, op: FilterOperator, value: FilterValue) -> bool:
    # An explicit BooleanValue wins over the operator.
    if isinstance(value, BooleanValue):
        return stored == value.value
    if op == FilterOperator.IS_TRUE:
        return stored
    if op == FilterOperator.IS_FALSE:
        return not stored
    return False


def _match_tags(names: List[str], op: FilterOperator, value: FilterValue) -> bool:
    if not isinstance(value, StringListValue):
        return False
    if op == FilterOperator.IS_EMPTY:
        return not names
    if op == FilterOperator.IS_NOT_EMPTY:
        return bool(names)

    present = {n.lower() for n in names}
    wanted = [n.lower() for n in value.value]
    if op == FilterOperator.CONTAINS:
        return all(n in present for n in wanted)
    if op == FilterOperator.NOT_CONTAINS:
        return not any(n in present for n in wanted)
    return False
