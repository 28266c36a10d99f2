"""Automation rule model: triggers, conditions, actions and change events."""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field

from stickytodo.models.task import Priority, TaskStatus, Task


class TriggerType(str, Enum):
    """Task event that can fire a rule."""
    TASK_CREATED = "task_created"
    STATUS_CHANGED = "status_changed"
    DUE_DATE_APPROACHING = "due_date_approaching"
    TASK_FLAGGED = "task_flagged"
    TASK_UNFLAGGED = "task_unflagged"
    MOVED_TO_BOARD = "moved_to_board"
    TAG_ADDED = "tag_added"
    PROJECT_SET = "project_set"
    CONTEXT_SET = "context_set"
    PRIORITY_CHANGED = "priority_changed"
    TASK_COMPLETED = "task_completed"

    @property
    def display_name(self) -> str:
        if self == TriggerType.MOVED_TO_BOARD:
            return "Moved to Board"
        return self.value.replace("_", " ").title()

    @property
    def description(self) -> str:
        return _TRIGGER_DESCRIPTIONS[self]


_TRIGGER_DESCRIPTIONS = {
    TriggerType.TASK_CREATED: "Triggers when a new task is created",
    TriggerType.STATUS_CHANGED: "Triggers when a task's status changes",
    TriggerType.DUE_DATE_APPROACHING: "Triggers when a task's due date is approaching",
    TriggerType.TASK_FLAGGED: "Triggers when a task is flagged",
    TriggerType.TASK_UNFLAGGED: "Triggers when a task is unflagged",
    TriggerType.MOVED_TO_BOARD: "Triggers when a task is moved to a board",
    TriggerType.TAG_ADDED: "Triggers when a tag is added to a task",
    TriggerType.PROJECT_SET: "Triggers when a project is assigned to a task",
    TriggerType.CONTEXT_SET: "Triggers when a context is assigned to a task",
    TriggerType.PRIORITY_CHANGED: "Triggers when a task's priority changes",
    TriggerType.TASK_COMPLETED: "Triggers when a task is completed",
}


class ActionType(str, Enum):
    """Effect a rule asks the caller to apply."""
    SET_STATUS = "set_status"
    SET_PRIORITY = "set_priority"
    SET_CONTEXT = "set_context"
    SET_PROJECT = "set_project"
    ADD_TAG = "add_tag"
    SET_DUE_DATE = "set_due_date"
    SET_DEFER_DATE = "set_defer_date"
    FLAG = "flag"
    UNFLAG = "unflag"
    MOVE_TO_BOARD = "move_to_board"
    SEND_NOTIFICATION = "send_notification"
    COPY_CONTEXT_FROM_PROJECT = "copy_context_from_project"
    COPY_PROJECT_FROM_PARENT = "copy_project_from_parent"

    @property
    def display_name(self) -> str:
        return _ACTION_DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return _ACTION_DESCRIPTIONS[self]

    @property
    def requires_value(self) -> bool:
        return self not in (
            ActionType.FLAG,
            ActionType.UNFLAG,
            ActionType.COPY_CONTEXT_FROM_PROJECT,
            ActionType.COPY_PROJECT_FROM_PARENT,
        )


_ACTION_DISPLAY_NAMES = {
    ActionType.SET_STATUS: "Set Status",
    ActionType.SET_PRIORITY: "Set Priority",
    ActionType.SET_CONTEXT: "Set Context",
    ActionType.SET_PROJECT: "Set Project",
    ActionType.ADD_TAG: "Add Tag",
    ActionType.SET_DUE_DATE: "Set Due Date",
    ActionType.SET_DEFER_DATE: "Set Defer Date",
    ActionType.FLAG: "Flag Task",
    ActionType.UNFLAG: "Unflag Task",
    ActionType.MOVE_TO_BOARD: "Move to Board",
    ActionType.SEND_NOTIFICATION: "Send Notification",
    ActionType.COPY_CONTEXT_FROM_PROJECT: "Copy Context from Project",
    ActionType.COPY_PROJECT_FROM_PARENT: "Copy Project from Parent",
}

_ACTION_DESCRIPTIONS = {
    ActionType.SET_STATUS: "Changes the task's status",
    ActionType.SET_PRIORITY: "Changes the task's priority",
    ActionType.SET_CONTEXT: "Sets the task's context",
    ActionType.SET_PROJECT: "Sets the task's project",
    ActionType.ADD_TAG: "Adds a tag to the task",
    ActionType.SET_DUE_DATE: "Sets the task's due date",
    ActionType.SET_DEFER_DATE: "Sets the task's defer date",
    ActionType.FLAG: "Flags the task",
    ActionType.UNFLAG: "Unflags the task",
    ActionType.MOVE_TO_BOARD: "Moves the task to a specific board",
    ActionType.SEND_NOTIFICATION: "Sends a notification",
    ActionType.COPY_CONTEXT_FROM_PROJECT: "Automatically sets context based on project",
    ActionType.COPY_PROJECT_FROM_PARENT: "Copies project from parent task",
}


class ConditionProperty(str, Enum):
    """Task property a rule condition inspects."""
    STATUS = "status"
    PRIORITY = "priority"
    PROJECT = "project"
    CONTEXT = "context"
    HAS_TAG = "has_tag"
    FLAGGED = "flagged"
    HAS_PROJECT = "has_project"
    HAS_CONTEXT = "has_context"
    HAS_DUE_DATE = "has_due_date"
    IS_SUBTASK = "is_subtask"
    TITLE = "title"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    IS_TRUE = "is_true"
    IS_FALSE = "is_false"

    @property
    def display_name(self) -> str:
        return {
            ConditionOperator.NOT_EQUALS: "does not equal",
            ConditionOperator.NOT_CONTAINS: "does not contain",
        }.get(self, self.value.replace("_", " "))

    @property
    def requires_value(self) -> bool:
        return self not in (ConditionOperator.IS_TRUE, ConditionOperator.IS_FALSE)


class ConditionLogic(str, Enum):
    """ALL = every condition must hold, ANY = at least one."""
    ALL = "all"
    ANY = "any"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class DateUnit(str, Enum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


class RelativeDateValue(BaseModel):
    """Signed calendar offset such as +3 days or -1 weeks."""

    model_config = ConfigDict(frozen=True)

    amount: int = Field(..., description="Signed number of units")
    unit: DateUnit = Field(..., description="Calendar unit")

    @property
    def display_string(self) -> str:
        sign = "+" if self.amount >= 0 else ""
        return f"{sign}{self.amount} {self.unit.value}"

    def apply(self, base: datetime) -> datetime:
        """Shift `base` by this offset using calendar arithmetic.

        Month offsets clamp to the last valid day (Jan 31 + 1 month is the end of
        February). An unrepresentable result leaves `base` unchanged.
        """
        delta = relativedelta(**{self.unit.value: self.amount})
        try:
            return base + delta
        except (OverflowError, ValueError):
            return base


class RuleCondition(BaseModel):
    """Property/operator/value test against the task."""

    model_config = ConfigDict(frozen=True)

    property: ConditionProperty = Field(..., description="Property to test")
    operator: ConditionOperator = Field(..., description="Comparison to apply")
    value: str = Field("", description="Comparison value")


class RuleAction(BaseModel):
    """Action emitted when a rule fires."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Action identifier")
    type: ActionType = Field(..., description="What to do")
    value: Optional[str] = Field(None, description="Action argument")
    relative_date: Optional[RelativeDateValue] = Field(None, description="Relative date for date actions")


class Rule(BaseModel):
    """Automation rule: trigger + conditions + actions."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Rule identifier")
    name: str = Field(..., description="Rule name")
    description: Optional[str] = Field(None, description="What the rule does")
    is_enabled: bool = Field(True, description="Disabled rules never fire")
    is_built_in: bool = Field(False, description="Shipped template")
    trigger_type: TriggerType = Field(..., description="Event that fires the rule")
    trigger_value: Optional[str] = Field(None, description="Required new value of the event")
    conditions: List[RuleCondition] = Field(default_factory=list, description="Conditions on the task")
    condition_logic: ConditionLogic = Field(ConditionLogic.ALL, description="How conditions combine")
    actions: List[RuleAction] = Field(default_factory=list, description="Actions to emit")
    created: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    modified: datetime = Field(default_factory=datetime.now, description="Last modification timestamp")
    last_triggered: Optional[datetime] = Field(None, description="Last time the rule fired")
    trigger_count: int = Field(0, ge=0, description="How often the rule fired")

    def with_trigger(self, at: Optional[datetime] = None) -> "Rule":
        """Copy recording one more firing at `at`."""
        return self.model_copy(update={
            "last_triggered": at or datetime.now(),
            "trigger_count": self.trigger_count + 1,
        })

    def touch(self, at: Optional[datetime] = None) -> "Rule":
        return self.model_copy(update={"modified": at or datetime.now()})

    def duplicate(self, at: Optional[datetime] = None) -> "Rule":
        """Editable copy with a fresh id and reset firing history."""
        stamp = at or datetime.now()
        return self.model_copy(update={
            "id": str(uuid.uuid4()),
            "name": f"{self.name} (copy)",
            "is_built_in": False,
            "created": stamp,
            "modified": stamp,
            "last_triggered": None,
            "trigger_count": 0,
        })


class TaskChangeContext(BaseModel):
    """A task-change event presented to the rule engine."""

    change_type: TriggerType = Field(..., description="Kind of change")
    old_value: Optional[str] = Field(None, description="Value before the change")
    new_value: Optional[str] = Field(None, description="Value after the change")
    task: Task = Field(..., description="Task after the change")

    @classmethod
    def task_created(cls, task: Task) -> "TaskChangeContext":
        return cls(change_type=TriggerType.TASK_CREATED, task=task)

    @classmethod
    def status_changed(cls, old: TaskStatus, new: TaskStatus, task: Task) -> "TaskChangeContext":
        return cls(change_type=TriggerType.STATUS_CHANGED, old_value=old.value, new_value=new.value, task=task)

    @classmethod
    def priority_changed(cls, old: Priority, new: Priority, task: Task) -> "TaskChangeContext":
        return cls(change_type=TriggerType.PRIORITY_CHANGED, old_value=old.value, new_value=new.value, task=task)

    @classmethod
    def task_flagged(cls, task: Task) -> "TaskChangeContext":
        return cls(change_type=TriggerType.TASK_FLAGGED, task=task)

    @classmethod
    def task_unflagged(cls, task: Task) -> "TaskChangeContext":
        return cls(change_type=TriggerType.TASK_UNFLAGGED, task=task)

    @classmethod
    def tag_added(cls, tag_name: str, task: Task) -> "TaskChangeContext":
        return cls(change_type=TriggerType.TAG_ADDED, new_value=tag_name, task=task)

    @classmethod
    def project_set(cls, project: str, task: Task) -> "TaskChangeContext":
        return cls(change_type=TriggerType.PROJECT_SET, new_value=project, task=task)

    @classmethod
    def context_set(cls, context: str, task: Task) -> "TaskChangeContext":
        return cls(change_type=TriggerType.CONTEXT_SET, new_value=context, task=task)

    @classmethod
    def moved_to_board(cls, board_id: str, task: Task) -> "TaskChangeContext":
        return cls(change_type=TriggerType.MOVED_TO_BOARD, new_value=board_id, task=task)

    @classmethod
    def task_completed(cls, task: Task) -> "TaskChangeContext":
        return cls(change_type=TriggerType.TASK_COMPLETED, task=task)

    @classmethod
    def due_date_approaching(cls, days_until_due: int, task: Task) -> "TaskChangeContext":
        return cls(change_type=TriggerType.DUE_DATE_APPROACHING, new_value=str(days_until_due), task=task)


# Built-in templates

def auto_flag_high_priority() -> Rule:
    return Rule(
        name="Auto-Flag High Priority",
        description="Automatically flag tasks when priority is set to high",
        is_built_in=True,
        trigger_type=TriggerType.PRIORITY_CHANGED,
        trigger_value="high",
        conditions=[RuleCondition(property=ConditionProperty.PRIORITY, operator=ConditionOperator.EQUALS, value="high")],
        actions=[RuleAction(type=ActionType.FLAG)],
    )


def auto_defer_weekend_tasks() -> Rule:
    return Rule(
        name="Auto-Defer Weekend Tasks",
        description="Defer tasks created on weekends to next Monday",
        is_built_in=True,
        trigger_type=TriggerType.TASK_CREATED,
        actions=[
            RuleAction(
                type=ActionType.SET_DEFER_DATE,
                relative_date=RelativeDateValue(amount=1, unit=DateUnit.DAYS),
            )
        ],
    )


def auto_context_from_project() -> Rule:
    return Rule(
        name="Auto-Context from Project",
        description="Automatically set context when project is assigned",
        is_built_in=True,
        trigger_type=TriggerType.PROJECT_SET,
        conditions=[RuleCondition(property=ConditionProperty.HAS_PROJECT, operator=ConditionOperator.IS_TRUE, value="true")],
        actions=[RuleAction(type=ActionType.COPY_CONTEXT_FROM_PROJECT)],
    )


def auto_tag_urgent_tasks() -> Rule:
    return Rule(
        name="Auto-Tag Urgent Tasks",
        description="Tag tasks as 'urgent' when they are high priority and due soon",
        is_built_in=True,
        trigger_type=TriggerType.DUE_DATE_APPROACHING,
        conditions=[RuleCondition(property=ConditionProperty.PRIORITY, operator=ConditionOperator.EQUALS, value="high")],
        condition_logic=ConditionLogic.ALL,
        actions=[
            RuleAction(type=ActionType.ADD_TAG, value="urgent"),
            RuleAction(type=ActionType.FLAG),
        ],
    )


def auto_archive_old_completed() -> Rule:
    return Rule(
        name="Auto-Archive Old Completed",
        description="Archive completed tasks after 30 days",
        is_built_in=True,
        trigger_type=TriggerType.TASK_COMPLETED,
        conditions=[RuleCondition(property=ConditionProperty.STATUS, operator=ConditionOperator.EQUALS, value="completed")],
        actions=[RuleAction(type=ActionType.SEND_NOTIFICATION, value="Task completed and will be archived")],
    )


def built_in_rule_templates() -> List[Rule]:
    return [
        auto_flag_high_priority(),
        auto_defer_weekend_tasks(),
        auto_context_from_project(),
        auto_tag_urgent_tasks(),
        auto_archive_old_completed(),
    ]
