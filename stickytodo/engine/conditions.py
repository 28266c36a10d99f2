"""Evaluation of automation rule conditions against a task."""

from stickytodo.models.rule import ConditionLogic, ConditionOperator, ConditionProperty, Rule, RuleCondition
from stickytodo.models.task import Task, normalize_token

_TOKEN_PROPERTIES = (ConditionProperty.STATUS, ConditionProperty.PRIORITY)


def evaluate_condition(condition: RuleCondition, task: Task) -> bool:
    """Evaluate a single rule condition.

    Text properties support equals, not_equals, contains and not_contains
    (case-insensitive). Flag-like properties read is_true as "flag set" and
    any other operator as its negation.
    """
    prop = condition.property
    op = condition.operator

    if prop == ConditionProperty.STATUS:
        return _match_text(task.status.value, op, condition.value, tokens=True)
    if prop == ConditionProperty.PRIORITY:
        return _match_text(task.priority.value, op, condition.value, tokens=True)
    if prop == ConditionProperty.PROJECT:
        return _match_text(task.project or "", op, condition.value)
    if prop == ConditionProperty.CONTEXT:
        return _match_text(task.context or "", op, condition.value)
    if prop == ConditionProperty.TITLE:
        return _match_text(task.title, op, condition.value)

    if prop == ConditionProperty.HAS_TAG:
        # Exact, case-sensitive tag name.
        flag = condition.value in task.tag_names
    elif prop == ConditionProperty.FLAGGED:
        flag = task.flagged
    elif prop == ConditionProperty.HAS_PROJECT:
        flag = task.project is not None
    elif prop == ConditionProperty.HAS_CONTEXT:
        flag = task.context is not None
    elif prop == ConditionProperty.HAS_DUE_DATE:
        flag = task.due is not None
    else:
        flag = task.is_subtask
    return flag if op == ConditionOperator.IS_TRUE else not flag


def conditions_match(rule: Rule, task: Task) -> bool:
    """Combine a rule's conditions with its logic; no conditions always match."""
    if not rule.conditions:
        return True
    results = (evaluate_condition(c, task) for c in rule.conditions)
    if rule.condition_logic == ConditionLogic.ALL:
        return all(results)
    return any(results)


def _match_text(stored: str, op: ConditionOperator, expected: str, tokens: bool = False) -> bool:
    if tokens:
        left, right = normalize_token(stored), normalize_token(expected)
    else:
        left, right = stored.lower(), expected.lower()

    if op == ConditionOperator.EQUALS:
        return left == right
    if op == ConditionOperator.NOT_EQUALS:
        return left != right
    if op == ConditionOperator.CONTAINS:
        return right in left
    if op == ConditionOperator.NOT_CONTAINS:
        return right not in left
    return False
