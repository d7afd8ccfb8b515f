"""Task list engine - filtering, pagination and row selection for the task board."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence

from src.models.task import Task, TaskStatus, is_completed_status
from src.utils.logging import get_structured_logger, truncate_text

logger = get_structured_logger(__name__)

DEFAULT_PAGE_SIZE = 10


class CompletionFilter(str, Enum):
    """Completion toggle, independent of the status filter."""
    ALL = "all"
    OUTSTANDING = "outstanding"
    COMPLETED = "completed"


class Layout(str, Enum):
    """Task list presentations; each keeps its own pagination."""
    TABLE = "table"
    GRID = "grid"


class BulkAction(str, Enum):
    """Actions offered for the selected rows."""
    DELETE = "delete"
    MARK_COMPLETED = "markCompleted"
    MARK_OUTSTANDING = "markOutstanding"
    MARK_READ = "markRead"
    MARK_UNREAD = "markUnread"


class SelectAllState(str, Enum):
    """Header checkbox state for the current page."""
    CHECKED = "checked"
    UNCHECKED = "unchecked"
    INDETERMINATE = "indeterminate"


# Field changes applied by each non-delete bulk action
BULK_UPDATES: dict[BulkAction, dict] = {
    BulkAction.MARK_COMPLETED: {"status": TaskStatus.DONE.value},
    BulkAction.MARK_OUTSTANDING: {"status": TaskStatus.IN_PROGRESS.value},
    BulkAction.MARK_READ: {"is_new": False},
    BulkAction.MARK_UNREAD: {"is_new": True},
}


@dataclass(frozen=True)
class FilterState:
    query: str = ""
    status: str = ""
    completion: CompletionFilter = CompletionFilter.ALL


@dataclass(frozen=True)
class Page:
    items: list[Task]
    page_index: int
    page_count: int
    page_size: int

    @property
    def ids(self) -> list[int]:
        return [task.id for task in self.items]

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0

    @property
    def has_next(self) -> bool:
        return self.page_index < self.page_count - 1


@dataclass
class PaginationState:
    page_index: int = 0
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class BulkResult:
    """Records a bulk action produced; the caller persists them."""
    action: BulkAction
    updated: list[Task] = field(default_factory=list)
    removed_ids: list[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.updated and not self.removed_ids

    @property
    def count(self) -> int:
        return len(self.updated) + len(self.removed_ids)


def matches_search(task: Task, query: str) -> bool:
    """Case-insensitive substring match against every string field of the task."""
    if not query:
        return True
    needle = query.lower()
    return any(
        isinstance(value, str) and needle in value.lower()
        for value in task.to_payload().values()
    )


def matches_status(task: Task, status: str) -> bool:
    if not status:
        return True
    return (task.status or "").lower() == status.lower()


def matches_completion(task: Task, completion: CompletionFilter) -> bool:
    if completion == CompletionFilter.COMPLETED:
        return is_completed_status(task.status)
    if completion == CompletionFilter.OUTSTANDING:
        return not is_completed_status(task.status)
    return True


def derive_visible(tasks: Iterable[Task], filters: FilterState) -> list[Task]:
    """Tasks passing search AND status AND completion, in collection order."""
    return [
        task for task in tasks
        if matches_search(task, filters.query)
        and matches_status(task, filters.status)
        and matches_completion(task, filters.completion)
    ]


def page_count_for(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total else 0


def clamp_page_index(page_index: int, page_count: int) -> int:
    return min(max(page_index, 0), max(0, page_count - 1))


def paginate(visible: Sequence[Task], page_index: int, page_size: int) -> Page:
    """Slice one page out of the filtered tasks; out-of-range indexes clamp."""
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    page_count = page_count_for(len(visible), page_size)
    index = clamp_page_index(page_index, page_count)
    start = index * page_size
    return Page(
        items=list(visible[start:start + page_size]),
        page_index=index,
        page_count=page_count,
        page_size=page_size,
    )


def bulk_apply(action: BulkAction, selected_ids: Iterable[int], tasks: Iterable[Task]) -> BulkResult:
    """Build the updated/removed records for the selected tasks still in the collection."""
    action = BulkAction(action)
    selected = set(selected_ids)
    result = BulkResult(action=action)
    for task in tasks:
        if task.id not in selected:
            continue
        if action == BulkAction.DELETE:
            result.removed_ids.append(task.id)
        else:
            result.updated.append(task.model_copy(update=BULK_UPDATES[action]))
    return result


@dataclass
class ViewSession:
    """One open lifetime of the task detail view."""
    task_id: int
    reported: set[int] = field(default_factory=set)


class TaskListEngine:
    """
    Holds the task collection and everything derived from it.

    Filters combine by AND and pagination is applied after filtering, once
    per layout. The selection never keeps ids missing from the collection:
    every recompute prunes them and clamps page indexes to the new page
    count. All operations are synchronous; persistence belongs to the caller.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None, page_size: int = DEFAULT_PAGE_SIZE):
        self._tasks: list[Task] = list(tasks or [])
        self._filters = FilterState()
        self._layout = Layout.TABLE
        self._pagination = {layout: PaginationState(page_size=page_size) for layout in Layout}
        self._selected: set[int] = set()
        self._view_session: Optional[ViewSession] = None
        self._visible: list[Task] = []
        self._recompute()

    # State

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def filters(self) -> FilterState:
        return self._filters

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def visible(self) -> list[Task]:
        return list(self._visible)

    @property
    def selected_ids(self) -> frozenset[int]:
        return frozenset(self._selected)

    def pagination(self, layout: Optional[Layout] = None) -> PaginationState:
        state = self._pagination[Layout(layout or self._layout)]
        return PaginationState(page_index=state.page_index, page_size=state.page_size)

    def set_tasks(self, tasks: Iterable[Task]) -> None:
        """Apply a freshly fetched collection (last applied wins)."""
        self._tasks = list(tasks)
        self._recompute()

    def _recompute(self) -> None:
        self._visible = derive_visible(self._tasks, self._filters)

        known_ids = {task.id for task in self._tasks}
        stale = self._selected - known_ids
        if stale:
            self._selected -= stale
            logger.debug("Pruned stale selection", pruned_ids=sorted(stale))

        for state in self._pagination.values():
            page_count = page_count_for(len(self._visible), state.page_size)
            state.page_index = clamp_page_index(state.page_index, page_count)

    # Filters

    def set_search(self, query: str) -> None:
        self._filters = FilterState(query or "", self._filters.status, self._filters.completion)
        logger.debug("Search changed", query=truncate_text(query))
        self._recompute()

    def set_status_filter(self, status: str) -> None:
        self._filters = FilterState(self._filters.query, status or "", self._filters.completion)
        self._recompute()

    def toggle_completion_filter(self, mode: CompletionFilter) -> CompletionFilter:
        """Select a completion mode; selecting the active one again resets to all."""
        mode = CompletionFilter(mode)
        if mode == CompletionFilter.ALL:
            raise ValueError("toggle mode must be 'outstanding' or 'completed'")
        completion = CompletionFilter.ALL if self._filters.completion == mode else mode
        self._filters = FilterState(self._filters.query, self._filters.status, completion)
        self._recompute()
        return completion

    # Pagination

    def set_layout(self, layout: Layout) -> None:
        self._layout = Layout(layout)

    @property
    def current_page(self) -> Page:
        state = self._pagination[self._layout]
        return paginate(self._visible, state.page_index, state.page_size)

    def set_page(self, page_index: int) -> Page:
        state = self._pagination[self._layout]
        page = paginate(self._visible, page_index, state.page_size)
        state.page_index = page.page_index
        return page

    def next_page(self) -> Page:
        return self.set_page(self._pagination[self._layout].page_index + 1)

    def prev_page(self) -> Page:
        return self.set_page(self._pagination[self._layout].page_index - 1)

    def set_page_size(self, page_size: int) -> Page:
        """Change page size, keeping the first row of the current page in view."""
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        state = self._pagination[self._layout]
        first_row = state.page_index * state.page_size
        state.page_size = page_size
        return self.set_page(first_row // page_size)

    # Selection

    def is_selected(self, task_id: int) -> bool:
        return task_id in self._selected

    def toggle_select(self, task_id: int) -> bool:
        """Flip one row; returns the new membership."""
        if task_id in self._selected:
            self._selected.discard(task_id)
            return False
        self._selected.add(task_id)
        return True

    def toggle_select_all_on_page(self, page_task_ids: Optional[Iterable[int]] = None) -> None:
        """Deselect the page if all of it is selected, otherwise select all of it."""
        ids = list(self.current_page.ids if page_task_ids is None else page_task_ids)
        if ids and all(task_id in self._selected for task_id in ids):
            self._selected.difference_update(ids)
        else:
            self._selected.update(ids)

    def page_selection_state(self, page_task_ids: Optional[Iterable[int]] = None) -> SelectAllState:
        ids = list(self.current_page.ids if page_task_ids is None else page_task_ids)
        selected_count = sum(1 for task_id in ids if task_id in self._selected)
        if ids and selected_count == len(ids):
            return SelectAllState.CHECKED
        if selected_count:
            return SelectAllState.INDETERMINATE
        return SelectAllState.UNCHECKED

    def clear_selection(self) -> None:
        self._selected.clear()

    def bulk_apply(self, action: BulkAction) -> BulkResult:
        """Produce records for the selected tasks and clear the selection."""
        result = bulk_apply(action, self._selected, self._tasks)
        logger.info(
            "Bulk action prepared",
            action=result.action.value,
            selected_count=len(self._selected),
            affected_count=result.count
        )
        self._selected.clear()
        return result

    # Task detail view

    def open_view(self, task: Task) -> Optional[Task]:
        """Start a view session for the task and report it viewed if it is new."""
        self._view_session = ViewSession(task_id=task.id)
        return self.mark_viewed(task)

    def mark_viewed(self, task: Task) -> Optional[Task]:
        """
        Return the is_new=False update the first time a new task is seen in
        the current view session, None otherwise. Repeated calls for the same
        task within one session never emit twice.
        """
        if self._view_session is None or self._view_session.task_id != task.id:
            self._view_session = ViewSession(task_id=task.id)
        if not task.is_new or task.id in self._view_session.reported:
            return None
        self._view_session.reported.add(task.id)
        return task.model_copy(update={"is_new": False})

    def close_view(self) -> None:
        self._view_session = None
