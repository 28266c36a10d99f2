"""Query and automation engine for StickyToDo."""

from stickytodo.engine.date_ranges import is_within
from stickytodo.engine.predicates import evaluate_rule
from stickytodo.engine.filtering import (
    filter_matches,
    is_visible,
    apply_perspective,
    smart_perspective_matches,
    apply_smart_perspective,
)
from stickytodo.engine.ordering import sort_tasks
from stickytodo.engine.grouping import group_tasks, due_date_bucket
from stickytodo.engine.conditions import evaluate_condition, conditions_match
from stickytodo.engine.rules_engine import (
    RuleMatch,
    RuleStatistics,
    trigger_matches,
    fire_rules,
    parse_date_string,
    resolve_action_date,
    resolve_action_updates,
    apply_actions,
    due_date_approaching_contexts,
    check_due_date_rules,
    validate_rule,
    rule_statistics,
    build_project_context_mappings,
    create_simple_rule,
)

__all__ = [
    "is_within",
    "evaluate_rule",
    "filter_matches",
    "is_visible",
    "apply_perspective",
    "smart_perspective_matches",
    "apply_smart_perspective",
    "sort_tasks",
    "group_tasks",
    "due_date_bucket",
    "evaluate_condition",
    "conditions_match",
    "RuleMatch",
    "RuleStatistics",
    "trigger_matches",
    "fire_rules",
    "parse_date_string",
    "resolve_action_date",
    "resolve_action_updates",
    "apply_actions",
    "due_date_approaching_contexts",
    "check_due_date_rules",
    "validate_rule",
    "rule_statistics",
    "build_project_context_mappings",
    "create_simple_rule",
]
