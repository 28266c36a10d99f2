"""Rule engine: decide which automation rules fire for a task-change event.

The engine is pure. `fire_rules` returns the actions of every eligible rule in
input order; applying them (and recording firings with `Rule.with_trigger`)
is the caller's job. `resolve_action_updates` and `apply_actions` describe the
field changes an executor would make without touching any store.
"""

import logging
import math
from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from stickytodo.config import load_settings
from stickytodo.engine.conditions import conditions_match
from stickytodo.local_calendar import LocalCalendar, get_calendar
from stickytodo.models.rule import (
    ActionType,
    Rule,
    RuleAction,
    TaskChangeContext,
    TriggerType,
)
from stickytodo.models.task import Priority, Tag, Task, TaskStatus

logger = logging.getLogger(__name__)

DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y")
SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class RuleMatch:
    """A rule that fired and the actions it emits."""

    rule: Rule
    actions: List[RuleAction]


@dataclass(frozen=True)
class RuleStatistics:
    """Usage summary over a rule set."""

    total_rules: int
    enabled_rules: int
    disabled_rules: int
    total_triggers: int
    most_triggered_rule: Optional[Rule]


def trigger_matches(rule: Rule, context: TaskChangeContext) -> bool:
    """Check trigger type and, when both sides carry one, the trigger value."""
    if rule.trigger_type != context.change_type:
        return False
    if rule.trigger_value is not None and context.new_value is not None:
        return rule.trigger_value.lower() == context.new_value.lower()
    return True


def fire_rules(context: TaskChangeContext, rules: Iterable[Rule]) -> List[RuleMatch]:
    """Find every enabled rule that fires for `context`.

    Rules are checked in input order, so the same event and rule list always
    yield the same matches in the same order. No rule is modified.

    Args:
        context: The task-change event
        rules: Candidate rules

    Returns:
        One RuleMatch per firing rule, in input order
    """
    matches = []
    for rule in rules:
        if not rule.is_enabled or not trigger_matches(rule, context):
            continue
        if not conditions_match(rule, context.task):
            logger.debug(f"Rule {rule.name!r} skipped: conditions not met for task {context.task.id}")
            continue
        logger.debug(f"Rule {rule.name!r} fired on {context.change_type.value} for task {context.task.id}")
        matches.append(RuleMatch(rule=rule, actions=list(rule.actions)))
    return matches


def parse_date_string(value: str) -> Optional[datetime]:
    """Parse YYYY-MM-DD or MM/DD/YYYY; None if neither fits."""
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    return None


def resolve_action_date(
    action: RuleAction,
    task: Task,
    now: Optional[datetime] = None,
    calendar: Optional[LocalCalendar] = None,
) -> Optional[datetime]:
    """Concrete date for a set_due_date / set_defer_date action.

    A relative due date is based on the task's current due date (or now when
    it has none); a relative defer date is always based on now. Literal values
    are read as local midnight.

    Returns:
        The date, or None when the action carries nothing resolvable
    """
    if action.type not in (ActionType.SET_DUE_DATE, ActionType.SET_DEFER_DATE):
        return None
    cal = get_calendar(calendar)
    ref = cal.resolve_now(now)

    if action.relative_date is not None:
        base = ref
        if action.type == ActionType.SET_DUE_DATE and task.due is not None:
            base = task.due
        return action.relative_date.apply(base)

    if action.value:
        parsed = parse_date_string(action.value)
        if parsed is None:
            logger.warning(f"Unparseable date {action.value!r} in {action.type.value} action")
            return None
        return cal.localize(parsed)
    return None


def resolve_action_updates(
    action: RuleAction,
    task: Task,
    now: Optional[datetime] = None,
    project_contexts: Optional[Dict[str, str]] = None,
    calendar: Optional[LocalCalendar] = None,
) -> Dict[str, Any]:
    """Task field updates one action implies.

    Keys are Task field names, so the result can go straight into
    `task.model_copy(update=...)`. Actions with no task-level effect
    (notifications, board moves, copying from a parent the engine cannot see,
    unknown status or priority names) give an empty dict.
    """
    kind = action.type

    if kind == ActionType.SET_STATUS:
        status = TaskStatus.parse(action.value)
        if status is None:
            logger.warning(f"Unknown status {action.value!r} in set_status action")
            return {}
        return {"status": status}
    if kind == ActionType.SET_PRIORITY:
        priority = Priority.parse(action.value)
        if priority is None:
            logger.warning(f"Unknown priority {action.value!r} in set_priority action")
            return {}
        return {"priority": priority}
    if kind == ActionType.SET_CONTEXT:
        return {"context": action.value}
    if kind == ActionType.SET_PROJECT:
        return {"project": action.value}
    if kind == ActionType.ADD_TAG:
        if not action.value or action.value in task.tag_names:
            return {}
        return {"tags": [*task.tags, Tag(name=action.value)]}
    if kind in (ActionType.SET_DUE_DATE, ActionType.SET_DEFER_DATE):
        resolved = resolve_action_date(action, task, now, calendar)
        if resolved is None:
            return {}
        return {"due" if kind == ActionType.SET_DUE_DATE else "defer": resolved}
    if kind == ActionType.FLAG:
        return {"flagged": True}
    if kind == ActionType.UNFLAG:
        return {"flagged": False}
    if kind == ActionType.COPY_CONTEXT_FROM_PROJECT:
        mapped = (project_contexts or {}).get(task.project) if task.project else None
        return {"context": mapped} if mapped else {}

    if kind == ActionType.SEND_NOTIFICATION:
        logger.info(f"Notification for task {task.id}: {action.value or ''}")
    else:
        logger.debug(f"Action {kind.value} left to the caller for task {task.id}")
    return {}


def apply_actions(
    task: Task,
    actions: Iterable[RuleAction],
    now: Optional[datetime] = None,
    project_contexts: Optional[Dict[str, str]] = None,
    calendar: Optional[LocalCalendar] = None,
) -> Task:
    """Return a copy of `task` with the actions applied in order."""
    cal = get_calendar(calendar)
    ref = cal.resolve_now(now)
    updated = task
    for action in actions:
        changes = resolve_action_updates(action, updated, ref, project_contexts, cal)
        if changes:
            logger.debug(f"Action {action.type.value} on task {task.id}: {sorted(changes)}")
            updated = updated.model_copy(update=changes)
    return updated


def due_date_approaching_contexts(
    tasks: Iterable[Task],
    now: Optional[datetime] = None,
    days: Optional[int] = None,
    calendar: Optional[LocalCalendar] = None,
) -> List[TaskChangeContext]:
    """Events for tasks due within the next `days` whole days.

    Overdue tasks are skipped. The event's new value is the number of whole
    days until the due date.
    """
    window = days if days is not None else load_settings().due_soon_days
    cal = get_calendar(calendar)
    ref = cal.resolve_now(now)

    contexts = []
    for task in tasks:
        if task.due is None or task.is_overdue(ref, cal):
            continue
        days_until = math.floor((cal.timestamp(task.due) - ref.timestamp()) / SECONDS_PER_DAY)
        if 0 <= days_until <= window:
            contexts.append(TaskChangeContext.due_date_approaching(days_until, task))
    return contexts


def check_due_date_rules(
    tasks: Iterable[Task],
    rules: List[Rule],
    now: Optional[datetime] = None,
    days: Optional[int] = None,
    calendar: Optional[LocalCalendar] = None,
) -> Dict[str, List[RuleMatch]]:
    """Run due_date_approaching rules over a snapshot; keyed by task id."""
    fired: Dict[str, List[RuleMatch]] = {}
    for context in due_date_approaching_contexts(tasks, now, days, calendar):
        matches = fire_rules(context, rules)
        if matches:
            fired[context.task.id] = matches
    return fired


def validate_rule(rule: Rule) -> List[str]:
    """Configuration problems with a rule; empty when valid."""
    errors = []
    if not rule.name.strip():
        errors.append("Rule name cannot be empty")
    for action in rule.actions:
        if action.type.requires_value and action.value is None and action.relative_date is None:
            errors.append(f"Action '{action.type.display_name}' requires a value")
    if not rule.actions:
        errors.append("Rule must have at least one action")
    for condition in rule.conditions:
        if condition.operator.requires_value and not condition.value:
            errors.append(f"Condition on '{condition.property.display_name}' requires a value")
    return errors


def rule_statistics(rules: List[Rule]) -> RuleStatistics:
    enabled = sum(1 for r in rules if r.is_enabled)
    return RuleStatistics(
        total_rules=len(rules),
        enabled_rules=enabled,
        disabled_rules=len(rules) - enabled,
        total_triggers=sum(r.trigger_count for r in rules),
        most_triggered_rule=max(rules, key=lambda r: r.trigger_count, default=None),
    )


def build_project_context_mappings(tasks: Iterable[Task]) -> Dict[str, str]:
    """Most common context per project, first seen winning ties."""
    counts: Dict[str, Counter] = defaultdict(Counter)
    for task in tasks:
        if task.project is None or task.context is None:
            continue
        counts[task.project][task.context] += 1

    mappings = {project: ctx.most_common(1)[0][0] for project, ctx in counts.items()}
    logger.debug(f"Built project-context mappings for {len(mappings)} projects")
    return mappings


def create_simple_rule(
    name: str,
    trigger: TriggerType,
    action: ActionType,
    action_value: Optional[str] = None,
) -> Rule:
    """One trigger, no conditions, one action."""
    return Rule(
        name=name,
        trigger_type=trigger,
        actions=[RuleAction(type=action, value=action_value)],
    )
