"""FastAPI web application for StickyToDo.

Stateless: every request carries its own task snapshot and nothing is stored.
Automation clients (shortcuts, scripts) use it to preview perspectives and
ask which rules fire for a task change.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from stickytodo.config import load_settings
from stickytodo.engine.filtering import apply_perspective, apply_smart_perspective
from stickytodo.engine.grouping import group_tasks
from stickytodo.engine.predicates import evaluate_rule
from stickytodo.engine.rules_engine import fire_rules, resolve_action_updates, validate_rule
from stickytodo.local_calendar import LocalCalendar
from stickytodo.models.filter_rule import FilterProperty, FilterRule, allowed_operators
from stickytodo.models.perspective import Perspective, ViewPolicy, built_in_perspectives
from stickytodo.models.rule import Rule, RuleAction, TaskChangeContext, built_in_rule_templates
from stickytodo.models.smart_perspective import SmartPerspective, built_in_smart_perspectives
from stickytodo.models.task import Task

settings = load_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="StickyToDo API",
    description="Task query and rule automation engine",
    version="0.1.0"
)


# Request models
class SnapshotRequest(BaseModel):
    """Task snapshot plus optional reference time."""
    tasks: List[Task] = Field(default_factory=list, description="Task snapshot")
    now: Optional[datetime] = Field(None, description="Reference instant (defaults to current time)")


class ApplyPerspectiveRequest(SnapshotRequest):
    perspective: Perspective


class ApplySmartPerspectiveRequest(SnapshotRequest):
    perspective: SmartPerspective


class EvaluateFilterRuleRequest(SnapshotRequest):
    rule: FilterRule


class FireRulesRequest(BaseModel):
    """Task-change event and the rules to consider."""
    context: TaskChangeContext
    rules: Optional[List[Rule]] = Field(None, description="Rules to consider (defaults to built-in templates)")
    project_contexts: Dict[str, str] = Field(default_factory=dict, description="Project to default context")
    now: Optional[datetime] = None


class ValidateRuleRequest(BaseModel):
    rule: Rule


# Response models
class TaskGroup(BaseModel):
    label: str
    task_ids: List[str]


class PerspectiveResult(BaseModel):
    """Filtered, sorted and grouped tasks."""
    tasks: List[Task]
    groups: List[TaskGroup]


class FilterRuleResult(BaseModel):
    matching_task_ids: List[str]


class FiredRule(BaseModel):
    rule_id: str
    rule_name: str
    actions: List[RuleAction]
    updates: List[Dict] = Field(default_factory=list, description="Field updates per action")


class FireRulesResponse(BaseModel):
    fired: List[FiredRule]
    task: Task = Field(..., description="Task with all fired actions applied")


class ValidateRuleResponse(BaseModel):
    valid: bool
    errors: List[str]


class OperatorInfo(BaseModel):
    value: str
    display_name: str


def _calendar() -> LocalCalendar:
    return LocalCalendar.from_settings()


def _view_result(view: ViewPolicy, tasks: List[Task], now: datetime, calendar: LocalCalendar) -> PerspectiveResult:
    groups = group_tasks(view, tasks, now, calendar)
    return PerspectiveResult(
        tasks=tasks,
        groups=[TaskGroup(label=label, task_ids=[t.id for t in members]) for label, members in groups],
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/perspectives", response_model=List[Perspective])
async def list_perspectives():
    """Built-in perspectives in sidebar order."""
    return built_in_perspectives(_calendar().now())


@app.get("/smart-perspectives", response_model=List[SmartPerspective])
async def list_smart_perspectives():
    return built_in_smart_perspectives()


@app.get("/rules/templates", response_model=List[Rule])
async def list_rule_templates():
    return built_in_rule_templates()


@app.post("/perspectives/apply", response_model=PerspectiveResult)
async def apply_custom_perspective(request: ApplyPerspectiveRequest):
    """Apply a perspective supplied in the request."""
    calendar = _calendar()
    now = calendar.resolve_now(request.now)
    tasks = apply_perspective(request.perspective, request.tasks, now, calendar)
    return _view_result(request.perspective, tasks, now, calendar)


@app.post("/perspectives/{perspective_id}/apply", response_model=PerspectiveResult)
async def apply_built_in_perspective(perspective_id: str, request: SnapshotRequest):
    """Apply a built-in perspective by id."""
    calendar = _calendar()
    now = calendar.resolve_now(request.now)
    perspective = next((p for p in built_in_perspectives(now) if p.id == perspective_id), None)
    if perspective is None:
        raise HTTPException(status_code=404, detail=f"Unknown perspective: {perspective_id}")
    tasks = apply_perspective(perspective, request.tasks, now, calendar)
    return _view_result(perspective, tasks, now, calendar)


@app.post("/smart-perspectives/apply", response_model=PerspectiveResult)
async def apply_smart(request: ApplySmartPerspectiveRequest):
    calendar = _calendar()
    now = calendar.resolve_now(request.now)
    tasks = apply_smart_perspective(request.perspective, request.tasks, now, calendar)
    return _view_result(request.perspective, tasks, now, calendar)


@app.post("/filter-rules/evaluate", response_model=FilterRuleResult)
async def evaluate_filter_rule(request: EvaluateFilterRuleRequest):
    """Ids of the tasks a single rule matches (rule builder preview)."""
    calendar = _calendar()
    now = calendar.resolve_now(request.now)
    matching = [t.id for t in request.tasks if evaluate_rule(request.rule, t, now, calendar)]
    return FilterRuleResult(matching_task_ids=matching)


@app.post("/rules/fire", response_model=FireRulesResponse)
async def fire(request: FireRulesRequest):
    """Rules that fire for a task change, and the resulting task."""
    calendar = _calendar()
    now = calendar.resolve_now(request.now)
    rules = request.rules if request.rules is not None else built_in_rule_templates()
    task = request.context.task

    fired = []
    for match in fire_rules(request.context, rules):
        updates = []
        for action in match.actions:
            changes = resolve_action_updates(action, task, now, request.project_contexts, calendar)
            updates.append(changes)
            if changes:
                task = task.model_copy(update=changes)
        fired.append(FiredRule(
            rule_id=match.rule.id,
            rule_name=match.rule.name,
            actions=match.actions,
            updates=updates,
        ))

    logger.info(f"{len(fired)} rule(s) fired for {request.context.change_type.value} on task {task.id}")
    return FireRulesResponse(fired=fired, task=task)


@app.post("/rules/validate", response_model=ValidateRuleResponse)
async def validate(request: ValidateRuleRequest):
    errors = validate_rule(request.rule)
    return ValidateRuleResponse(valid=not errors, errors=errors)


@app.get("/filter-properties/{property_name}/operators", response_model=List[OperatorInfo])
async def list_operators(property_name: FilterProperty):
    """Operators a rule builder should offer for a property."""
    return [OperatorInfo(value=op.value, display_name=op.display_name) for op in allowed_operators(property_name)]
