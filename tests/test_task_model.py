"""Tests for the Task model and its derived flags."""

from datetime import timedelta

from stickytodo.models.task import Priority, Tag, Task, TaskStatus, normalize_token


class TestTaskDerivedFlags:

    def test_is_deferred(self, make_task, now, calendar):
        assert make_task(defer=now + timedelta(minutes=1)).is_deferred(now, calendar)
        assert not make_task(defer=now).is_deferred(now, calendar)
        assert not make_task(defer=None).is_deferred(now, calendar)

    def test_is_overdue_ignores_completed(self, make_task, now, calendar):
        past = now - timedelta(hours=1)
        assert make_task(due=past).is_overdue(now, calendar)
        assert not make_task(due=past, status=TaskStatus.COMPLETED).is_overdue(now, calendar)

    def test_is_due_this_week_inclusive(self, make_task, now, calendar):
        assert make_task(due=now).is_due_this_week(now, calendar)
        assert make_task(due=now + timedelta(days=7)).is_due_this_week(now, calendar)
        assert not make_task(due=now + timedelta(days=7, seconds=1)).is_due_this_week(now, calendar)

    def test_structure_flags(self, make_task):
        task = make_task(parent_id="p", subtask_ids=["c"], attachments=["a.png"], tags=[Tag(name="x")])
        assert task.is_subtask and task.has_subtasks and task.has_attachments
        assert task.tag_names == ["x"]


class TestTaskSearchAndEnums:

    def test_matches_search(self, make_task):
        task = make_task(title="Plan trip", notes="book hotel", project="Vacation", context="@computer")
        assert task.matches_search("HOTEL")
        assert task.matches_search("vaca")
        assert not task.matches_search("invoice")

    def test_status_parse_and_display(self):
        assert TaskStatus.parse("nextAction") == TaskStatus.NEXT_ACTION
        assert TaskStatus.parse("archived") is None
        assert TaskStatus.SOMEDAY.display_name == "Someday/Maybe"
        assert not TaskStatus.COMPLETED.is_active

    def test_priority_order(self):
        assert sorted(Priority, key=lambda p: p.sort_order) == [Priority.LOW, Priority.MEDIUM, Priority.HIGH]
        assert Priority.parse("HIGH") == Priority.HIGH

    def test_normalize_token(self):
        assert normalize_token("Next-Action") == normalize_token("next_action") == "nextaction"

    def test_json_round_trip(self, sample_task):
        assert Task.model_validate(sample_task.model_dump(mode="json")) == sample_task
