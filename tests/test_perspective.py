"""Tests for Perspective apply, sorting and grouping."""

from datetime import datetime, timedelta

from stickytodo.engine.filtering import apply_perspective
from stickytodo.engine.grouping import due_date_bucket, group_tasks
from stickytodo.engine.ordering import sort_tasks
from stickytodo.models.filter import Filter
from stickytodo.models.perspective import GroupBy, Perspective, SortBy, SortDirection, built_in_perspectives
from stickytodo.models.task import Priority, TaskStatus


class TestApplyPerspective:

    def test_visibility_gates(self, make_task, now, calendar):
        """Completed and deferred tasks are hidden unless the view shows them."""
        visible = make_task(title="visible")
        done = make_task(title="done", status=TaskStatus.COMPLETED)
        deferred = make_task(title="later", defer=now + timedelta(days=2))
        tasks = [visible, done, deferred]

        hidden = Perspective(id="p", name="P")
        assert [t.title for t in apply_perspective(hidden, tasks, now, calendar)] == ["visible"]

        shown = Perspective(id="p", name="P", show_completed=True, show_deferred=True)
        assert len(apply_perspective(shown, tasks, now, calendar)) == 3

    def test_defer_in_past_is_visible(self, make_task, now, calendar):
        task = make_task(defer=now - timedelta(hours=1))
        assert apply_perspective(Perspective(id="p", name="P"), [task], now, calendar) == [task]

    def test_filter_then_sort(self, make_task, now, calendar):
        perspective = Perspective(
            id="p",
            name="P",
            filter=Filter(status=TaskStatus.NEXT_ACTION),
            sort_by=SortBy.PRIORITY,
            sort_direction=SortDirection.DESCENDING,
        )
        low = make_task(priority=Priority.LOW)
        high = make_task(priority=Priority.HIGH)
        inbox = make_task(status=TaskStatus.INBOX, priority=Priority.HIGH)
        assert apply_perspective(perspective, [low, inbox, high], now, calendar) == [high, low]

    def test_due_soon_built_in(self, make_task, now, calendar):
        due_soon = next(p for p in built_in_perspectives(now) if p.id == "due-soon")
        soon = make_task(due=now + timedelta(days=3))
        far = make_task(due=now + timedelta(days=30))
        assert apply_perspective(due_soon, [far, soon], now, calendar) == [soon]


class TestSortTasks:

    def test_due_ascending_puts_dated_first(self, make_task, calendar):
        """Ascending due order: dated tasks first, earliest first."""
        none_a = make_task(title="a")
        late = make_task(title="late", due=datetime(2024, 6, 1))
        none_b = make_task(title="b")
        early = make_task(title="early", due=datetime(2024, 5, 20))
        result = sort_tasks([none_a, late, none_b, early], SortBy.DUE, SortDirection.ASCENDING, calendar)
        assert [t.title for t in result] == ["early", "late", "a", "b"]

    def test_due_descending_puts_dated_last(self, make_task, calendar):
        none_a = make_task(title="a")
        late = make_task(title="late", due=datetime(2024, 6, 1))
        early = make_task(title="early", due=datetime(2024, 5, 20))
        result = sort_tasks([early, none_a, late], SortBy.DUE, SortDirection.DESCENDING, calendar)
        assert [t.title for t in result] == ["a", "late", "early"]

    def test_ties_keep_input_order(self, make_task, calendar):
        tasks = [make_task(title=str(i), priority=Priority.MEDIUM) for i in range(5)]
        for direction in SortDirection:
            result = sort_tasks(tasks, SortBy.PRIORITY, direction, calendar)
            assert [t.title for t in result] == ["0", "1", "2", "3", "4"]

    def test_effort_ascending(self, make_task, calendar):
        tasks = [make_task(title="none"), make_task(title="60", effort=60), make_task(title="5", effort=5)]
        result = sort_tasks(tasks, SortBy.EFFORT, SortDirection.ASCENDING, calendar)
        assert [t.title for t in result] == ["5", "60", "none"]

    def test_status_by_value_text(self, make_task, calendar):
        tasks = [make_task(status=TaskStatus.WAITING), make_task(status=TaskStatus.INBOX)]
        result = sort_tasks(tasks, SortBy.STATUS, SortDirection.ASCENDING, calendar)
        assert [t.status for t in result] == [TaskStatus.INBOX, TaskStatus.WAITING]


class TestGroupTasks:

    def test_none_gives_single_group(self, make_task, now, calendar):
        tasks = [make_task(), make_task()]
        assert group_tasks(Perspective(id="p", name="P"), tasks, now, calendar) == [("All", tasks)]

    def test_context_groups_sorted_by_label(self, make_task, now, calendar):
        a = make_task(context="@office")
        b = make_task(context=None)
        c = make_task(context="@home")
        d = make_task(context="@office")
        view = Perspective(id="p", name="P", group_by=GroupBy.CONTEXT)
        groups = group_tasks(view, [a, b, c, d], now, calendar)
        assert [label for label, _ in groups] == ["@home", "@office", "No Context"]
        assert dict(groups)["@office"] == [a, d]

    def test_empty_string_context_is_its_own_group(self, make_task, now, calendar):
        """Only a missing context lands in No Context."""
        blank = make_task(context="")
        missing = make_task(context=None)
        view = Perspective(id="p", name="P", group_by=GroupBy.CONTEXT)
        groups = dict(group_tasks(view, [blank, missing], now, calendar))
        assert groups[""] == [blank]
        assert groups["No Context"] == [missing]

    def test_status_and_priority_use_display_names(self, make_task, now, calendar):
        tasks = [make_task(status=TaskStatus.WAITING, priority=Priority.HIGH)]
        by_status = group_tasks(Perspective(id="p", name="P", group_by=GroupBy.STATUS), tasks, now, calendar)
        by_priority = group_tasks(Perspective(id="p", name="P", group_by=GroupBy.PRIORITY), tasks, now, calendar)
        assert by_status[0][0] == "Waiting For"
        assert by_priority[0][0] == "High"

    def test_grouping_covers_every_task_once(self, make_task, now, calendar):
        tasks = [
            make_task(due=now + timedelta(hours=2)),
            make_task(due=now + timedelta(days=1)),
            make_task(due=now - timedelta(days=3)),
            make_task(due=now + timedelta(days=4)),
            make_task(due=now + timedelta(days=40)),
            make_task(due=None),
            make_task(project="Home"),
        ]
        for group_by in GroupBy:
            groups = group_tasks(Perspective(id="p", name="P", group_by=group_by), tasks, now, calendar)
            ids = [t.id for _, members in groups for t in members]
            assert sorted(ids) == sorted(t.id for t in tasks)
            assert len(ids) == len(set(ids))

    def test_due_date_buckets(self, make_task, now, calendar):
        assert due_date_bucket(make_task(due=now + timedelta(hours=2)), now, calendar) == "Today"
        assert due_date_bucket(make_task(due=now - timedelta(hours=2)), now, calendar) == "Today"
        assert due_date_bucket(make_task(due=now + timedelta(days=1)), now, calendar) == "Tomorrow"
        assert due_date_bucket(make_task(due=now - timedelta(days=2)), now, calendar) == "Overdue"
        assert due_date_bucket(make_task(due=now + timedelta(days=5)), now, calendar) == "This Week"
        assert due_date_bucket(make_task(due=now + timedelta(days=9)), now, calendar) == "Later"
        assert due_date_bucket(make_task(due=None), now, calendar) == "No Due Date"

    def test_completed_past_due_is_not_overdue(self, make_task, now, calendar):
        task = make_task(due=now - timedelta(days=2), status=TaskStatus.COMPLETED)
        assert due_date_bucket(task, now, calendar) == "Later"
