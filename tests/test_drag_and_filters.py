"""
Tests for drop-target resolution and the board search filter.
"""
from allwork.core.drag import DragOutcome, column_id, is_click, resolve_drop
from allwork.modules.board.filters import filter_tasks, group_by_assignee
from allwork.modules.tasks.schemas import TaskResponse


def _task(task_id, title, assignee="user-1"):
    return TaskResponse(id=task_id, title=title, team_id=1, assignee_id=assignee)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Drag resolution
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_short_movement_is_a_click_even_over_trash():
    """Under 8px of travel never deletes or reassigns"""
    assert resolve_drop(3, 4, "trash-zone").outcome == DragOutcome.CLICK
    assert resolve_drop(0, 7.9, column_id("user-2")).outcome == DragOutcome.CLICK
    assert resolve_drop(0, 0, None).outcome == DragOutcome.CLICK


def test_threshold_boundary():
    assert is_click(5, 6)  # ~7.8px
    assert not is_click(0, 8)
    assert not is_click(6, 6.1)


def test_drop_on_trash_deletes():
    assert resolve_drop(40, 0, "trash-zone").outcome == DragOutcome.DELETE


def test_drop_on_column_assigns_to_that_user():
    resolution = resolve_drop(120, 10, column_id("2b1e-uuid"))
    assert resolution.outcome == DragOutcome.ASSIGN
    assert resolution.user_id == "2b1e-uuid"


def test_drop_outside_any_zone_is_noop():
    assert resolve_drop(50, 50, None).outcome == DragOutcome.NONE
    assert resolve_drop(50, 50, "sidebar").outcome == DragOutcome.NONE
    assert resolve_drop(50, 50, "user-").outcome == DragOutcome.NONE


def test_custom_threshold_and_trash_id():
    assert resolve_drop(10, 0, "bin", threshold=20).outcome == DragOutcome.CLICK
    assert resolve_drop(30, 0, "bin", threshold=20, trash_zone_id="bin").outcome == DragOutcome.DELETE


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Search filter
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_search_matches_substring_case_insensitively():
    tasks = [_task(1, "Write spec"), _task(2, "Review PR")]

    assert [t.id for t in filter_tasks(tasks, "spec")] == [1]
    assert [t.id for t in filter_tasks(tasks, "SPEC")] == [1]
    assert [t.id for t in filter_tasks(tasks, "review pr")] == [2]


def test_empty_search_keeps_all():
    tasks = [_task(1, "Write spec"), _task(2, "Review PR")]
    assert filter_tasks(tasks, "") == tasks
    assert filter_tasks(tasks, None) == tasks


def test_group_by_assignee_skips_unassigned():
    tasks = [_task(1, "a", "u1"), _task(2, "b", "u2"), _task(3, "c", "u1"), _task(4, "d", None)]
    columns = group_by_assignee(tasks)
    assert [t.id for t in columns["u1"]] == [1, 3]
    assert [t.id for t in columns["u2"]] == [2]
    assert None not in columns
