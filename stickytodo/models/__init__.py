"""Data models for StickyToDo."""

from stickytodo.models.task import Task, TaskType, TaskStatus, Priority, Tag, normalize_token
from stickytodo.models.filter_rule import (
    FilterProperty,
    FilterOperator,
    DateRange,
    PropertyKind,
    StringValue,
    NumberValue,
    DateValue,
    BooleanValue,
    DateRangeValue,
    StringListValue,
    FilterValue,
    FilterRule,
    allowed_operators,
    is_operator_allowed,
)
from stickytodo.models.filter import Filter
from stickytodo.models.perspective import (
    GroupBy,
    SortBy,
    SortDirection,
    ViewPolicy,
    Perspective,
    built_in_perspectives,
)
from stickytodo.models.smart_perspective import FilterLogic, SmartPerspective, built_in_smart_perspectives
from stickytodo.models.rule import (
    TriggerType,
    ActionType,
    ConditionProperty,
    ConditionOperator,
    ConditionLogic,
    DateUnit,
    RelativeDateValue,
    RuleCondition,
    RuleAction,
    Rule,
    TaskChangeContext,
    built_in_rule_templates,
)

__all__ = [
    "Task",
    "TaskType",
    "TaskStatus",
    "Priority",
    "Tag",
    "normalize_token",
    "FilterProperty",
    "FilterOperator",
    "DateRange",
    "PropertyKind",
    "StringValue",
    "NumberValue",
    "DateValue",
    "BooleanValue",
    "DateRangeValue",
    "StringListValue",
    "FilterValue",
    "FilterRule",
    "allowed_operators",
    "is_operator_allowed",
    "Filter",
    "GroupBy",
    "SortBy",
    "SortDirection",
    "ViewPolicy",
    "Perspective",
    "built_in_perspectives",
    "FilterLogic",
    "SmartPerspective",
    "built_in_smart_perspectives",
    "TriggerType",
    "ActionType",
    "ConditionProperty",
    "ConditionOperator",
    "ConditionLogic",
    "DateUnit",
    "RelativeDateValue",
    "RuleCondition",
    "RuleAction",
    "Rule",
    "TaskChangeContext",
    "built_in_rule_templates",
]
