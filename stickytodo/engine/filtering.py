"""Filter, Perspective and SmartPerspective evaluation."""

import logging
from datetime import datetime
from typing import List, Optional

from stickytodo.engine.ordering import sort_tasks
from stickytodo.engine.predicates import evaluate_rule
from stickytodo.local_calendar import LocalCalendar, get_calendar
from stickytodo.models.filter import Filter
from stickytodo.models.perspective import Perspective, ViewPolicy
from stickytodo.models.smart_perspective import FilterLogic, SmartPerspective
from stickytodo.models.task import Task, TaskStatus

logger = logging.getLogger(__name__)


def filter_matches(criteria: Filter, task: Task, calendar: Optional[LocalCalendar] = None) -> bool:
    """Check a task against every present Filter field.

    A missing task value fails any present bound on it. The stored
    `expression` is not evaluated.

    Args:
        criteria: Filter to apply
        task: Task snapshot
        calendar: Calendar used to compare naive and aware dates

    Returns:
        True if the task satisfies all present fields
    """
    if criteria.type is not None and task.type != criteria.type:
        return False
    if criteria.status is not None and task.status != criteria.status:
        return False
    if criteria.project is not None and task.project != criteria.project:
        return False
    if criteria.context is not None and task.context != criteria.context:
        return False
    if criteria.flagged is not None and task.flagged != criteria.flagged:
        return False
    if criteria.priority is not None and task.priority != criteria.priority:
        return False

    if criteria.due_before is not None or criteria.due_after is not None or criteria.defer_after is not None:
        cal = get_calendar(calendar)
        if criteria.due_before is not None:
            if task.due is None or cal.timestamp(task.due) > cal.timestamp(criteria.due_before):
                return False
        if criteria.due_after is not None:
            if task.due is None or cal.timestamp(task.due) < cal.timestamp(criteria.due_after):
                return False
        if criteria.defer_after is not None:
            if task.defer is None or cal.timestamp(task.defer) < cal.timestamp(criteria.defer_after):
                return False

    if criteria.effort_max is not None:
        if task.effort is None or task.effort > criteria.effort_max:
            return False
    if criteria.effort_min is not None:
        if task.effort is None or task.effort < criteria.effort_min:
            return False

    return True


def is_visible(view: ViewPolicy, task: Task, now: datetime, calendar: Optional[LocalCalendar] = None) -> bool:
    """Apply the completed and deferred visibility toggles."""
    if not view.show_completed and task.status == TaskStatus.COMPLETED:
        return False
    if not view.show_deferred and task.is_deferred(now, calendar):
        return False
    return True


def apply_perspective(
    perspective: Perspective,
    tasks: List[Task],
    now: Optional[datetime] = None,
    calendar: Optional[LocalCalendar] = None,
) -> List[Task]:
    """Filter, gate and sort tasks for a Perspective.

    Args:
        perspective: Perspective to apply
        tasks: Task snapshot
        now: Reference instant for deferral
        calendar: Calendar for date handling

    Returns:
        Matching tasks in display order
    """
    cal = get_calendar(calendar)
    ref = cal.resolve_now(now)
    matched = [
        t for t in tasks
        if filter_matches(perspective.filter, t, cal) and is_visible(perspective, t, ref, cal)
    ]
    logger.debug(f"Perspective {perspective.id}: {len(matched)} of {len(tasks)} tasks match")
    return sort_tasks(matched, perspective.sort_by, perspective.sort_direction, cal)


def smart_perspective_matches(
    perspective: SmartPerspective,
    task: Task,
    now: Optional[datetime] = None,
    calendar: Optional[LocalCalendar] = None,
) -> bool:
    """Visibility gates, then the rules combined with AND or OR.

    A perspective without rules matches every visible task.
    """
    cal = get_calendar(calendar)
    ref = cal.resolve_now(now)
    if not is_visible(perspective, task, ref, cal):
        return False
    if not perspective.rules:
        return True
    results = (evaluate_rule(rule, task, ref, cal) for rule in perspective.rules)
    if perspective.logic == FilterLogic.AND:
        return all(results)
    return any(results)


def apply_smart_perspective(
    perspective: SmartPerspective,
    tasks: List[Task],
    now: Optional[datetime] = None,
    calendar: Optional[LocalCalendar] = None,
) -> List[Task]:
    cal = get_calendar(calendar)
    ref = cal.resolve_now(now)
    matched = [t for t in tasks if smart_perspective_matches(perspective, t, ref, cal)]
    logger.debug(f"Smart perspective {perspective.name}: {len(matched)} of {len(tasks)} tasks match")
    return sort_tasks(matched, perspective.sort_by, perspective.sort_direction, cal)
