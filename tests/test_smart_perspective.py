"""Tests for SmartPerspective matching and the built-in smart perspectives."""

import pytest
from datetime import datetime, timedelta

from stickytodo.engine.filtering import apply_smart_perspective, smart_perspective_matches
from stickytodo.engine.predicates import evaluate_rule
from stickytodo.models.filter_rule import (
    BooleanValue,
    FilterOperator,
    FilterProperty,
    FilterRule,
    NumberValue,
    StringValue,
)
from stickytodo.models.perspective import SortBy, SortDirection
from stickytodo.models.smart_perspective import FilterLogic, SmartPerspective, built_in_smart_perspectives
from stickytodo.models.task import Priority, TaskStatus


@pytest.fixture
def rules():
    return [
        FilterRule(property=FilterProperty.FLAGGED, operator_type=FilterOperator.IS_TRUE, value=BooleanValue(value=True)),
        FilterRule(property=FilterProperty.EFFORT, operator_type=FilterOperator.LESS_THAN, value=NumberValue(value=20)),
    ]


class TestSmartPerspectiveMatches:

    def test_no_rules_matches_visible_tasks(self, make_task, now, calendar):
        sp = SmartPerspective(name="Everything")
        assert smart_perspective_matches(sp, make_task(), now, calendar)
        assert not smart_perspective_matches(sp, make_task(status=TaskStatus.COMPLETED), now, calendar)

    def test_and_or_equal_all_any(self, make_task, now, calendar, rules):
        """AND equals all(rule matches); OR equals any(rule matches)."""
        tasks = [
            make_task(flagged=True, effort=10),
            make_task(flagged=True, effort=60),
            make_task(flagged=False, effort=10),
            make_task(flagged=False, effort=None),
        ]
        sp_and = SmartPerspective(name="and", rules=rules, logic=FilterLogic.AND)
        sp_or = SmartPerspective(name="or", rules=rules, logic=FilterLogic.OR)
        for task in tasks:
            results = [evaluate_rule(r, task, now, calendar) for r in rules]
            assert smart_perspective_matches(sp_and, task, now, calendar) == all(results)
            assert smart_perspective_matches(sp_or, task, now, calendar) == any(results)

    def test_visibility_gate_before_rules(self, make_task, now, calendar, rules):
        sp = SmartPerspective(name="or", rules=rules, logic=FilterLogic.OR)
        deferred = make_task(flagged=True, defer=now + timedelta(days=1))
        assert not smart_perspective_matches(sp, deferred, now, calendar)
        shown = sp.model_copy(update={"show_deferred": True})
        assert smart_perspective_matches(shown, deferred, now, calendar)


class TestBuiltInSmartPerspectives:

    def test_quick_wins_scenario(self, make_task, now, calendar):
        """Only short, high-priority next actions survive, shortest first."""
        quick_wins = next(sp for sp in built_in_smart_perspectives() if sp.name == "Quick Wins")
        assert quick_wins.logic == FilterLogic.AND
        assert quick_wins.sort_by == SortBy.EFFORT
        assert quick_wins.sort_direction == SortDirection.ASCENDING

        t1 = make_task(title="T1", effort=15, priority=Priority.HIGH, status=TaskStatus.NEXT_ACTION)
        t2 = make_task(title="T2", effort=45, priority=Priority.HIGH, status=TaskStatus.NEXT_ACTION)
        t3 = make_task(title="T3", effort=10, priority=Priority.LOW, status=TaskStatus.NEXT_ACTION)
        t4 = make_task(title="T4", effort=5, priority=Priority.HIGH, status=TaskStatus.NEXT_ACTION)
        t5 = make_task(title="T5", effort=20, priority=Priority.HIGH, status=TaskStatus.WAITING)

        result = apply_smart_perspective(quick_wins, [t1, t2, t3, t4, t5], now, calendar)
        assert [t.title for t in result] == ["T4", "T1"]

    def test_todays_focus_is_or(self, make_task, now, calendar):
        focus = next(sp for sp in built_in_smart_perspectives() if sp.id == "todays-focus")
        due_today = make_task(status=TaskStatus.INBOX, due=datetime(2024, 5, 15, 18, 0))
        flagged = make_task(status=TaskStatus.SOMEDAY, flagged=True)
        neither = make_task(status=TaskStatus.WAITING)
        assert smart_perspective_matches(focus, due_today, now, calendar)
        assert smart_perspective_matches(focus, flagged, now, calendar)
        assert not smart_perspective_matches(focus, neither, now, calendar)

    def test_no_context(self, make_task, now, calendar):
        sp = next(sp for sp in built_in_smart_perspectives() if sp.name == "No Context")
        assert smart_perspective_matches(sp, make_task(context=None), now, calendar)
        assert not smart_perspective_matches(sp, make_task(context="@home"), now, calendar)

    def test_waiting_this_week_shows_deferred(self, make_task, now, calendar):
        sp = next(sp for sp in built_in_smart_perspectives() if sp.id == "waiting-this-week")
        task = make_task(status=TaskStatus.WAITING, defer=now + timedelta(days=3))
        assert smart_perspective_matches(sp, task, now, calendar)

    def test_built_ins_are_flagged(self):
        smart = built_in_smart_perspectives()
        assert [sp.name for sp in smart] == [
            "Today's Focus", "Quick Wins", "Waiting This Week", "Stale Tasks", "No Context",
        ]
        assert all(sp.is_built_in for sp in smart)

    def test_json_round_trip(self):
        quick_wins = built_in_smart_perspectives()[1]
        restored = SmartPerspective.model_validate(quick_wins.model_dump(mode="json"))
        assert restored == quick_wins
        assert isinstance(restored.rules[0].value, NumberValue)
        assert isinstance(restored.rules[1].value, StringValue)
