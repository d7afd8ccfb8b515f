"""Tests for the task list engine."""

import pytest
from src.models.task import Task
from src.services.task_engine import (
    BulkAction,
    CompletionFilter,
    FilterState,
    Layout,
    SelectAllState,
    TaskListEngine,
    bulk_apply,
    derive_visible,
    paginate,
)
from tests.utils.assertions import assert_subsequence
from tests.utils.factories import create_tasks


def _ids(tasks):
    return [task.id for task in tasks]


# Filtering

@pytest.mark.unit
def test_completion_filter_scenario():
    """Test completed toggle on a Done/Due pair, then toggling it off."""
    engine = TaskListEngine([
        Task(id=1, title="A", status="Done"),
        Task(id=2, title="B", status="Due"),
    ])

    engine.toggle_completion_filter(CompletionFilter.COMPLETED)
    assert _ids(engine.visible) == [1]

    engine.toggle_completion_filter(CompletionFilter.COMPLETED)
    assert _ids(engine.visible) == [1, 2]
    assert engine.filters.completion == CompletionFilter.ALL


@pytest.mark.unit
def test_completion_filter_switches_modes():
    """Test picking the other mode replaces the active one instead of resetting."""
    engine = TaskListEngine([
        Task(id=1, title="A", status="Done"),
        Task(id=2, title="B", status="Over Due"),
        Task(id=3, title="C", status=None),
    ])

    engine.toggle_completion_filter("completed")
    assert engine.toggle_completion_filter("outstanding") == CompletionFilter.OUTSTANDING
    assert _ids(engine.visible) == [2, 3]


@pytest.mark.unit
def test_completion_filter_rejects_all():
    """Test that 'all' is reached by toggling, not requested directly."""
    engine = TaskListEngine()

    with pytest.raises(ValueError):
        engine.toggle_completion_filter(CompletionFilter.ALL)


@pytest.mark.unit
def test_search_client_over_sample_tasks(sample_tasks):
    """Test the 'client' search over the sample tasks."""
    engine = TaskListEngine(sample_tasks)

    engine.set_search("client")

    assert [task.title for task in engine.visible] == ["Client Meeting", "Client Feedback"]


@pytest.mark.unit
def test_search_case_insensitive_any_string_field(sample_tasks):
    """Test search matches assignee names and case numbers in any case."""
    engine = TaskListEngine(sample_tasks)

    engine.set_search("GRACE")
    assert _ids(engine.visible) == [7]

    engine.set_search("case-00")
    assert len(engine.visible) == len(sample_tasks)


@pytest.mark.unit
def test_search_ignores_non_string_fields():
    """Test ids and flags never match a search."""
    tasks = [Task(id=42, title="Alpha", is_new=True), Task(id=7, title="Beta 42")]

    visible = derive_visible(tasks, FilterState(query="42"))
    assert _ids(visible) == [7]

    assert derive_visible(tasks, FilterState(query="true")) == []


@pytest.mark.unit
def test_status_filter_exact_case_insensitive(sample_tasks):
    """Test status filter equality and its empty value."""
    engine = TaskListEngine(sample_tasks)

    engine.set_status_filter("in progress")
    assert _ids(engine.visible) == [1, 5]

    engine.set_status_filter("In")
    assert engine.visible == []

    engine.set_status_filter("")
    assert len(engine.visible) == len(sample_tasks)


@pytest.mark.unit
def test_filters_combine_with_and(sample_tasks):
    """Test search, status and completion narrow each other."""
    engine = TaskListEngine(sample_tasks)

    engine.set_search("meeting")
    engine.toggle_completion_filter(CompletionFilter.OUTSTANDING)
    assert _ids(engine.visible) == [2]

    engine.set_status_filter("Done")
    assert engine.visible == []


@pytest.mark.unit
@pytest.mark.parametrize("filters", [
    FilterState(),
    FilterState(query="e"),
    FilterState(status="Due"),
    FilterState(completion=CompletionFilter.OUTSTANDING),
    FilterState(query="a", status="Done", completion=CompletionFilter.COMPLETED),
])
def test_derive_visible_is_ordered_subsequence(filters):
    """Test output keeps collection order and holds exactly the matching tasks."""
    tasks = create_tasks(30)

    visible = derive_visible(tasks, filters)

    assert_subsequence(visible, tasks)
    expected = [t for t in tasks if t in visible]
    assert visible == expected
    for task in tasks:
        in_view = task in visible
        matches = (
            (not filters.query or filters.query.lower() in " ".join(
                v.lower() for v in task.to_payload().values() if isinstance(v, str)))
            and (not filters.status or (task.status or "").lower() == filters.status.lower())
            and (filters.completion == CompletionFilter.ALL
                 or (filters.completion == CompletionFilter.COMPLETED) == task.is_completed)
        )
        assert in_view == matches


@pytest.mark.unit
def test_derive_visible_does_not_mutate(sample_tasks):
    """Test the input collection is left untouched."""
    snapshot = [task.model_copy() for task in sample_tasks]

    derive_visible(sample_tasks, FilterState(query="x", status="Done"))

    assert sample_tasks == snapshot


# Pagination

@pytest.mark.unit
def test_paginate_slices_and_counts():
    """Test page slicing and page count."""
    tasks = create_tasks(23)

    page = paginate(tasks, 2, 10)

    assert page.page_count == 3
    assert page.page_index == 2
    assert _ids(page.items) == [21, 22, 23]
    assert page.has_previous and not page.has_next


@pytest.mark.unit
@pytest.mark.parametrize("requested,expected", [(-5, 0), (0, 0), (2, 2), (3, 2), (100, 2)])
def test_paginate_clamps_index(requested, expected):
    """Test out-of-range page indexes clamp to the nearest bound."""
    assert paginate(create_tasks(25), requested, 10).page_index == expected


@pytest.mark.unit
def test_paginate_empty():
    """Test an empty view has zero pages and stays on page 0."""
    page = paginate([], 4, 10)

    assert page.page_count == 0
    assert page.page_index == 0
    assert page.items == []


@pytest.mark.unit
@pytest.mark.parametrize("total,size", [(0, 10), (1, 10), (10, 10), (11, 3), (37, 5)])
def test_pages_cover_visible_exactly(total, size):
    """Test all pages together hold every visible task exactly once."""
    tasks = create_tasks(total)
    first = paginate(tasks, 0, size)

    pages = [paginate(tasks, i, size) for i in range(first.page_count)]

    assert sum(len(page.items) for page in pages) == total
    assert [t.id for page in pages for t in page.items] == _ids(tasks)


@pytest.mark.unit
def test_paginate_rejects_bad_page_size():
    with pytest.raises(ValueError):
        paginate([], 0, 0)


@pytest.mark.unit
def test_page_clamped_when_filtered_set_shrinks():
    """Test the stored page index follows a shrinking view."""
    tasks = create_tasks(25, status="Due")
    tasks[0] = tasks[0].model_copy(update={"status": "Done"})
    engine = TaskListEngine(tasks)
    engine.next_page()
    engine.next_page()
    assert engine.current_page.page_index == 2

    engine.toggle_completion_filter(CompletionFilter.COMPLETED)

    assert engine.pagination().page_index == 0
    assert _ids(engine.current_page.items) == [1]


@pytest.mark.unit
def test_layouts_paginate_independently():
    """Test table and grid keep separate page state."""
    engine = TaskListEngine(create_tasks(30))

    engine.set_page(2)
    engine.set_layout(Layout.GRID)
    engine.set_page_size(5)
    engine.next_page()

    assert engine.pagination(Layout.TABLE).page_index == 2
    assert engine.pagination(Layout.TABLE).page_size == 10
    assert engine.pagination(Layout.GRID).page_index == 1
    assert _ids(engine.current_page.items) == [6, 7, 8, 9, 10]


@pytest.mark.unit
def test_prev_and_next_stop_at_bounds():
    engine = TaskListEngine(create_tasks(15))

    assert engine.prev_page().page_index == 0
    assert engine.next_page().page_index == 1
    assert engine.next_page().page_index == 1


@pytest.mark.unit
def test_set_page_size_keeps_first_row_in_view():
    engine = TaskListEngine(create_tasks(40))
    engine.set_page(3)  # rows 31-40

    page = engine.set_page_size(20)

    assert page.page_index == 1
    assert 31 in page.ids


# Selection

@pytest.mark.unit
def test_toggle_select_flips_membership(sample_tasks):
    engine = TaskListEngine(sample_tasks)

    assert engine.toggle_select(3) is True
    assert engine.is_selected(3)
    assert engine.toggle_select(3) is False
    assert engine.selected_ids == frozenset()


@pytest.mark.unit
def test_select_all_on_page(sample_tasks):
    """Test select-all selects the page, then deselects it when all are selected."""
    engine = TaskListEngine(sample_tasks, page_size=5)
    engine.toggle_select(2)
    assert engine.page_selection_state() == SelectAllState.INDETERMINATE

    engine.toggle_select_all_on_page()
    assert engine.selected_ids == frozenset({1, 2, 3, 4, 5})
    assert engine.page_selection_state() == SelectAllState.CHECKED

    engine.toggle_select_all_on_page()
    assert engine.selected_ids == frozenset()
    assert engine.page_selection_state() == SelectAllState.UNCHECKED


@pytest.mark.unit
def test_select_all_twice_restores_state_when_page_unchanged(sample_tasks):
    """Test double invocation returns to the previous selection for an all-selected page."""
    engine = TaskListEngine(sample_tasks, page_size=3)
    for task_id in (1, 2, 3, 8):
        engine.toggle_select(task_id)
    before = engine.selected_ids

    engine.toggle_select_all_on_page([1, 2, 3])
    assert engine.selected_ids == frozenset({8})

    engine.toggle_select_all_on_page([1, 2, 3])
    assert engine.selected_ids == before


@pytest.mark.unit
def test_select_all_leaves_other_pages_alone(sample_tasks):
    engine = TaskListEngine(sample_tasks, page_size=5)
    engine.toggle_select(9)

    engine.toggle_select_all_on_page()
    engine.toggle_select_all_on_page()

    assert engine.selected_ids == frozenset({9})


@pytest.mark.unit
def test_select_all_on_empty_page_is_noop():
    engine = TaskListEngine()

    engine.toggle_select_all_on_page()

    assert engine.selected_ids == frozenset()
    assert engine.page_selection_state() == SelectAllState.UNCHECKED


@pytest.mark.unit
def test_selection_pruned_when_task_disappears(sample_tasks):
    """Test a deleted task leaves the selection on the next collection refresh."""
    engine = TaskListEngine(sample_tasks)
    engine.toggle_select(2)
    engine.toggle_select(3)

    engine.set_tasks([task for task in sample_tasks if task.id != 2])

    assert engine.selected_ids == frozenset({3})


@pytest.mark.unit
def test_selection_survives_filtering(sample_tasks):
    """Test hidden-but-existing tasks stay selected."""
    engine = TaskListEngine(sample_tasks)
    engine.toggle_select(3)

    engine.toggle_completion_filter(CompletionFilter.OUTSTANDING)

    assert engine.selected_ids == frozenset({3})


# Bulk actions

@pytest.mark.unit
@pytest.mark.parametrize("action,field,value", [
    (BulkAction.MARK_COMPLETED, "status", "Done"),
    (BulkAction.MARK_OUTSTANDING, "status", "In Progress"),
    (BulkAction.MARK_READ, "is_new", False),
    (BulkAction.MARK_UNREAD, "is_new", True),
])
def test_bulk_update_actions(sample_tasks, action, field, value):
    """Test each update action on the selected tasks."""
    engine = TaskListEngine(sample_tasks)
    engine.toggle_select(1)
    engine.toggle_select(4)

    result = engine.bulk_apply(action)

    assert _ids(result.updated) == [1, 4]
    assert all(getattr(task, field) == value for task in result.updated)
    assert result.removed_ids == []
    assert engine.selected_ids == frozenset()


@pytest.mark.unit
def test_bulk_delete(sample_tasks):
    engine = TaskListEngine(sample_tasks)
    engine.toggle_select(6)
    engine.toggle_select(2)

    result = engine.bulk_apply(BulkAction.DELETE)

    assert result.removed_ids == [2, 6]
    assert result.updated == []
    assert engine.selected_ids == frozenset()


@pytest.mark.unit
def test_bulk_apply_does_not_modify_collection(sample_tasks):
    """Test the engine keeps its tasks until the caller refreshes."""
    engine = TaskListEngine(sample_tasks)
    engine.toggle_select(1)

    engine.bulk_apply("markCompleted")

    assert engine.tasks[0].status == "In Progress"


@pytest.mark.unit
def test_bulk_apply_skips_ids_missing_from_tasks(sample_tasks):
    """Test selected ids absent from the collection produce nothing."""
    result = bulk_apply(BulkAction.MARK_READ, {1, 999}, sample_tasks)

    assert _ids(result.updated) == [1]
    assert result.count == 1


@pytest.mark.unit
def test_bulk_apply_with_empty_selection(sample_tasks):
    engine = TaskListEngine(sample_tasks)

    result = engine.bulk_apply(BulkAction.DELETE)

    assert result.is_empty
    assert engine.selected_ids == frozenset()


@pytest.mark.unit
def test_bulk_apply_rejects_unknown_action(sample_tasks):
    with pytest.raises(ValueError):
        bulk_apply("archive", {1}, sample_tasks)


# Viewed tracking

@pytest.mark.unit
def test_mark_viewed_emits_once_per_session(sample_tasks):
    """Test repeated renders of a new task emit a single update."""
    engine = TaskListEngine(sample_tasks)
    task = sample_tasks[0]
    assert task.is_new

    update = engine.open_view(task)
    repeats = [engine.mark_viewed(task) for _ in range(5)]

    assert update is not None and update.is_new is False
    assert update.id == task.id
    assert repeats == [None] * 5


@pytest.mark.unit
def test_mark_viewed_ignores_read_tasks(sample_tasks):
    engine = TaskListEngine(sample_tasks)

    assert engine.open_view(sample_tasks[1]) is None


@pytest.mark.unit
def test_mark_viewed_new_session_per_opening(sample_tasks):
    """Test a new opening of a still-new task may emit again."""
    engine = TaskListEngine(sample_tasks)
    task = sample_tasks[0]

    engine.open_view(task)
    engine.close_view()

    assert engine.open_view(task) is not None


@pytest.mark.unit
def test_mark_viewed_resets_on_different_task(sample_tasks):
    engine = TaskListEngine(sample_tasks)
    first, fourth = sample_tasks[0], sample_tasks[3]

    engine.open_view(first)
    assert engine.mark_viewed(fourth) is not None
    assert engine.mark_viewed(fourth) is None
