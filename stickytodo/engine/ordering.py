"""Stable task ordering for perspectives.

Optional fields (due, defer, effort) use a (present, value) key: ascending
order puts tasks with a value first, descending puts them last. Ties keep
their input order.
"""

from typing import Callable, List, Optional

from stickytodo.local_calendar import LocalCalendar, get_calendar
from stickytodo.models.perspective import SortBy, SortDirection
from stickytodo.models.task import Task


def sort_tasks(
    tasks: List[Task],
    sort_by: SortBy,
    direction: SortDirection = SortDirection.ASCENDING,
    calendar: Optional[LocalCalendar] = None,
) -> List[Task]:
    """Sort tasks by one field.

    Args:
        tasks: Tasks to sort
        sort_by: Field to sort on
        direction: Ascending or descending
        calendar: Calendar used to compare naive and aware dates

    Returns:
        New list, stably sorted
    """
    key = _sort_key(sort_by, calendar)
    return sorted(tasks, key=key, reverse=direction == SortDirection.DESCENDING)


def _sort_key(sort_by: SortBy, calendar: Optional[LocalCalendar]) -> Callable[[Task], tuple]:
    if sort_by == SortBy.TITLE:
        return lambda t: (t.title,)
    if sort_by == SortBy.PRIORITY:
        return lambda t: (t.priority.sort_order,)
    if sort_by == SortBy.STATUS:
        return lambda t: (t.status.value,)
    if sort_by == SortBy.EFFORT:
        return lambda t: _optional_key(t.effort)

    cal = get_calendar(calendar)
    if sort_by == SortBy.CREATED:
        return lambda t: (cal.timestamp(t.created),)
    if sort_by == SortBy.MODIFIED:
        return lambda t: (cal.timestamp(t.modified),)
    if sort_by == SortBy.DUE:
        return lambda t: _optional_key(cal.timestamp(t.due) if t.due is not None else None)
    return lambda t: _optional_key(cal.timestamp(t.defer) if t.defer is not None else None)


def _optional_key(value) -> tuple:
    """Tasks with a value sort before tasks without one (in ascending order)."""
    if value is None:
        return (1,)
    return (0, value)
