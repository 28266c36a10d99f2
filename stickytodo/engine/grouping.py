"""Grouping of perspective results into labelled buckets."""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from stickytodo.local_calendar import LocalCalendar, get_calendar
from stickytodo.models.perspective import GroupBy, ViewPolicy
from stickytodo.models.task import Task

ALL_GROUP = "All"
NO_CONTEXT = "No Context"
NO_PROJECT = "No Project"
NO_DUE_DATE = "No Due Date"


def due_date_bucket(task: Task, now: datetime, calendar: Optional[LocalCalendar] = None) -> str:
    """Bucket label for a task's due date.

    Today and Tomorrow win over Overdue, and Overdue wins over This Week.
    """
    if task.due is None:
        return NO_DUE_DATE
    cal = get_calendar(calendar)
    today = cal.day_of(now)
    due_day = cal.day_of(task.due)
    if due_day == today:
        return "Today"
    if due_day == today + timedelta(days=1):
        return "Tomorrow"
    if task.is_overdue(now, cal):
        return "Overdue"
    if task.is_due_this_week(now, cal):
        return "This Week"
    return "Later"


def group_tasks(
    view: ViewPolicy,
    tasks: List[Task],
    now: Optional[datetime] = None,
    calendar: Optional[LocalCalendar] = None,
) -> List[Tuple[str, List[Task]]]:
    """Group tasks by the view's group_by setting.

    Every task lands in exactly one group and keeps its input order inside it.
    Groups are returned sorted by label.

    Args:
        view: Perspective or SmartPerspective
        tasks: Tasks to group (usually already filtered and sorted)
        now: Reference instant for due-date buckets
        calendar: Calendar for day boundaries

    Returns:
        List of (label, tasks) pairs
    """
    if view.group_by == GroupBy.NONE:
        return [(ALL_GROUP, list(tasks))]

    cal = get_calendar(calendar)
    ref = cal.resolve_now(now)
    groups: Dict[str, List[Task]] = defaultdict(list)
    for task in tasks:
        groups[_group_label(view.group_by, task, ref, cal)].append(task)
    return sorted(groups.items(), key=lambda item: item[0])


def _group_label(group_by: GroupBy, task: Task, now: datetime, calendar: LocalCalendar) -> str:
    if group_by == GroupBy.CONTEXT:
        return NO_CONTEXT if task.context is None else task.context
    if group_by == GroupBy.PROJECT:
        return NO_PROJECT if task.project is None else task.project
    if group_by == GroupBy.STATUS:
        return task.status.display_name
    if group_by == GroupBy.PRIORITY:
        return task.priority.display_name
    return due_date_bucket(task, now, calendar)
