"""Task board - runs user actions against the data source and keeps the engine current."""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

from src.models.case import Case
from src.models.employee import Employee
from src.models.matter import Matter
from src.models.task import Task, TaskCreate, TaskEdit, validate_form
from src.services.pms_client import PMSClient
from src.services.query_cache import (
    CASES_KEY,
    EMPLOYEES_KEY,
    MATTERS_KEY,
    TASKS_KEY,
    QueryCache,
)
from src.services.task_engine import BulkAction, BulkResult, TaskListEngine
from src.utils.errors import BulkOperationError, DataSourceError, TaskNotFoundError
from src.utils.logging import get_structured_logger, log_timing, truncate_text
from src.views.columns import StatusBadge, format_long_date, priority_color, status_badge

logger = get_structured_logger(__name__)

SUCCESS = "success"
ERROR = "error"
INFO = "info"


@dataclass(frozen=True)
class Notice:
    """User-facing outcome of an action."""
    level: str
    title: str
    text: str


@dataclass(frozen=True)
class References:
    cases: list[Case]
    matters: list[Matter]
    employees: list[Employee]

    def case(self, case_id: Optional[int]) -> Optional[Case]:
        return next((c for c in self.cases if c.id == case_id), None) if case_id is not None else None

    def matter(self, matter_id: Optional[int]) -> Optional[Matter]:
        return next((m for m in self.matters if m.id == matter_id), None) if matter_id is not None else None

    def employee(self, employee_id: Optional[int]) -> Optional[Employee]:
        return next((e for e in self.employees if e.id == employee_id), None) if employee_id is not None else None


@dataclass(frozen=True)
class TaskDetail:
    """Everything the task detail view shows."""
    task: Task
    case: Optional[Case]
    matter: Optional[Matter]
    assignee: Optional[Employee]
    status: StatusBadge
    priority_color: str
    created_on: str
    due_on: str
    notice: Optional[Notice] = None


def _error_notice(error: Exception) -> Notice:
    return Notice(ERROR, "Error", str(error))


class TaskBoard:
    """
    Collaborator between the engine and the data source.

    The engine only ever sees collections fetched through the cache; after
    every mutation the tasks entry is invalidated and reloaded. Data source
    failures of a mutation come back as a single error Notice and leave the
    engine as it was; load() and refresh() raise them instead. Form
    validation failures raise TaskValidationError before anything is sent.
    """

    def __init__(self, client: PMSClient, cache: QueryCache, engine: Optional[TaskListEngine] = None):
        self.client = client
        self.cache = cache
        self.engine = engine or TaskListEngine(page_size=client.config.page_size)

    async def load(self) -> list[Task]:
        """
        Fetch tasks and reference lists through the cache and hand the tasks to the engine.

        Unlike the mutations, a failed load returns no Notice: DataSourceError
        propagates and the engine keeps its previous collection, so callers
        must catch it on the initial load.
        """
        tasks, _ = await asyncio.gather(
            self.cache.fetch(TASKS_KEY, self.client.list_tasks),
            self.load_references(),
        )
        self.engine.set_tasks(tasks)
        return tasks

    async def refresh(self) -> list[Task]:
        """Invalidate the tasks entry and load again; raises DataSourceError like load()."""
        self.cache.invalidate(TASKS_KEY)
        return await self.load()

    async def load_references(self) -> References:
        cases, matters, employees = await asyncio.gather(
            self.cache.fetch(CASES_KEY, self.client.list_cases),
            self.cache.fetch(MATTERS_KEY, self.client.list_matters),
            self.cache.fetch(EMPLOYEES_KEY, self.client.list_employees),
        )
        return References(cases=cases, matters=matters, employees=employees)

    async def _reload_after_mutation(self) -> None:
        try:
            await self.refresh()
        except DataSourceError as e:
            # Cache entry stays invalidated; the next load retries
            logger.warning("Task reload after mutation failed", error=str(e))

    async def _fill_references(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Copy case number, matter and assignee name from the reference lists."""
        refs = await self.load_references()
        case = refs.case(payload.get("case"))
        if case is not None:
            payload["case_number"] = case.case_number
            if payload.get("matter") is None:
                payload["matter"] = case.matter
        employee = refs.employee(payload.get("assigned_to"))
        if employee is not None:
            payload["assignee_name"] = employee.full_name
        return payload

    # Bulk actions

    async def apply_bulk(self, action: BulkAction) -> Notice:
        """Persist a bulk action for the current selection, one request per task."""
        result = self.engine.bulk_apply(action)
        if result.is_empty:
            return Notice(INFO, "Nothing to do", "No tasks are selected.")

        with log_timing("apply_bulk", logger=logger, action=result.action.value, affected_count=result.count):
            failed = await self._persist_bulk(result)
            await self._reload_after_mutation()

        if failed:
            error = BulkOperationError(result.action.value, failed, result.count)
            logger.error("Bulk action partially failed", action=result.action.value, failed=failed, total=result.count)
            return _error_notice(error)
        return Notice(SUCCESS, "Done", f"Updated {result.count} task(s).")

    async def _persist_bulk(self, result: BulkResult) -> int:
        if result.action == BulkAction.DELETE:
            requests = [self.client.delete_task(task_id) for task_id in result.removed_ids]
        else:
            requests = [self.client.update_task(task.id, task.to_payload()) for task in result.updated]

        outcomes = await asyncio.gather(*requests, return_exceptions=True)
        failed = 0
        for outcome in outcomes:
            if isinstance(outcome, DataSourceError):
                failed += 1
                logger.warning("Bulk item failed", action=result.action.value, error=str(outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
        return failed

    # Single task actions

    async def create_task(self, values: dict[str, Any]) -> Notice:
        form = validate_form(TaskCreate, values)
        try:
            payload = await self._fill_references(form.to_payload())
            task = await self.client.create_task(payload)
        except DataSourceError as e:
            logger.error("Task creation failed", error=str(e))
            return _error_notice(e)

        logger.info("Task created", task_id=task.id, title=truncate_text(task.title))
        await self._reload_after_mutation()
        return Notice(SUCCESS, "Good job!", "You have created a new Task")

    async def edit_task(self, task_id: int, values: dict[str, Any]) -> Notice:
        form = validate_form(TaskEdit, values)
        try:
            payload = await self._fill_references(form.to_payload())
            await self.client.update_task(task_id, payload)
        except DataSourceError as e:
            logger.error("Task update failed", task_id=task_id, error=str(e))
            return _error_notice(e)

        await self._reload_after_mutation()
        return Notice(SUCCESS, "Task updated", "Your changes have been saved")

    async def delete_task(self, task_id: int) -> Notice:
        try:
            await self.client.delete_task(task_id)
        except DataSourceError as e:
            logger.error("Task deletion failed", task_id=task_id, error=str(e))
            return _error_notice(e)

        await self._reload_after_mutation()
        return Notice(SUCCESS, "Deleted", "The task has been deleted")

    # Detail view

    def _find_task(self, task_id: int) -> Task:
        task = next((t for t in self.engine.tasks if t.id == task_id), None)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def open_task(self, task_id: int) -> TaskDetail:
        """Open the detail view; a new task is reported viewed once per opening."""
        task = self._find_task(task_id)
        refs = await self.load_references()

        notice = None
        viewed = self.engine.open_view(task)
        if viewed is not None:
            try:
                await self.client.update_task(task.id, viewed.to_payload())
                task = viewed
                await self._reload_after_mutation()
            except DataSourceError as e:
                logger.error("Marking task viewed failed", task_id=task.id, error=str(e))
                notice = _error_notice(e)

        case = refs.case(task.case)
        return TaskDetail(
            task=task,
            case=case,
            matter=refs.matter(case.matter if case else task.matter),
            assignee=refs.employee(task.assigned_to),
            status=status_badge(task.status),
            priority_color=priority_color(task.priority),
            created_on=format_long_date(task.created_at),
            due_on=format_long_date(task.due_date),
            notice=notice,
        )

    def close_task(self) -> None:
        self.engine.close_view()

    async def send_reminder(self, task_id: int) -> Notice:
        task = self._find_task(task_id)
        refs = await self.load_references()
        assignee = refs.employee(task.assigned_to)
        name = assignee.full_name if assignee else (task.assignee_name or "assignee")
        logger.info("Reminder sent", task_id=task_id)
        return Notice(INFO, "Reminder", f"Reminder sent to {name}!")
