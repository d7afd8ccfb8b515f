"""In-memory task repository backing the mock data source."""

import copy
import threading
from datetime import datetime, timezone
from typing import Any, Optional

from src.data.seed import SEED_CASES, SEED_EMPLOYEES, SEED_MATTERS, SEED_TASKS
from src.models.case import Case
from src.models.employee import Employee
from src.models.matter import Matter
from src.models.task import Task
from src.utils.errors import TaskNotFoundError
from src.utils.logging import get_structured_logger, truncate_text

logger = get_structured_logger(__name__)

# Fields a client may not overwrite on create/update
_SERVER_FIELDS = ("id",)


class TaskRepository:
    """
    Task collection plus read-only reference lists.

    Records are kept in insertion order. Every method takes the lock, so a
    threaded HTTP server can share one instance.
    """

    def __init__(
        self,
        tasks: Optional[list[dict]] = None,
        cases: Optional[list[dict]] = None,
        matters: Optional[list[dict]] = None,
        employees: Optional[list[dict]] = None,
    ):
        self._lock = threading.RLock()
        self._seed = {
            "tasks": copy.deepcopy(SEED_TASKS if tasks is None else tasks),
            "cases": copy.deepcopy(SEED_CASES if cases is None else cases),
            "matters": copy.deepcopy(SEED_MATTERS if matters is None else matters),
            "employees": copy.deepcopy(SEED_EMPLOYEES if employees is None else employees),
        }
        self.reset()

    def reset(self) -> None:
        """Restore the seed records."""
        with self._lock:
            self._tasks: list[Task] = [Task(**raw) for raw in self._seed["tasks"]]
            self._cases = [Case(**raw) for raw in self._seed["cases"]]
            self._matters = [Matter(**raw) for raw in self._seed["matters"]]
            self._employees = [Employee(**raw) for raw in self._seed["employees"]]
        logger.info("Task repository reset", tasks_count=len(self._tasks))

    def _index_of(self, task_id: int) -> int:
        for idx, task in enumerate(self._tasks):
            if task.id == task_id:
                return idx
        raise TaskNotFoundError(task_id)

    def _next_id(self) -> int:
        return max((task.id for task in self._tasks), default=0) + 1

    # Tasks

    def list_tasks(self) -> list[Task]:
        with self._lock:
            return [task.model_copy(deep=True) for task in self._tasks]

    def get_task(self, task_id: int) -> Task:
        with self._lock:
            return self._tasks[self._index_of(task_id)].model_copy(deep=True)

    def create_task(self, data: dict[str, Any]) -> Task:
        """Store a new task; the server assigns the id and marks it new."""
        fields = {k: v for k, v in data.items() if k not in _SERVER_FIELDS}
        with self._lock:
            fields["id"] = self._next_id()
            fields["is_new"] = True
            if not fields.get("created_at"):
                fields["created_at"] = datetime.now(timezone.utc)
            task = Task(**fields)
            self._tasks.append(task)

        logger.info(
            "Task created",
            task_id=task.id,
            title=truncate_text(task.title),
            status=task.status
        )
        return task.model_copy(deep=True)

    def update_task(self, task_id: int, data: dict[str, Any]) -> Task:
        """Merge fields into an existing task."""
        changes = {k: v for k, v in data.items() if k not in _SERVER_FIELDS}
        with self._lock:
            idx = self._index_of(task_id)
            merged = self._tasks[idx].to_payload()
            merged.update(changes)
            task = Task(**merged)
            self._tasks[idx] = task

        logger.info("Task updated", task_id=task_id, fields=sorted(changes))
        return task.model_copy(deep=True)

    def delete_task(self, task_id: int) -> None:
        with self._lock:
            idx = self._index_of(task_id)
            del self._tasks[idx]

        logger.info("Task deleted", task_id=task_id)

    # Reference lists

    def list_cases(self) -> list[Case]:
        with self._lock:
            return [case.model_copy() for case in self._cases]

    def list_matters(self) -> list[Matter]:
        with self._lock:
            return [matter.model_copy() for matter in self._matters]

    def list_employees(self) -> list[Employee]:
        with self._lock:
            return [employee.model_copy() for employee in self._employees]


# Global repository instance
_task_repository: Optional[TaskRepository] = None


def get_task_repository() -> TaskRepository:
    """Get or create the process-wide repository used by the HTTP handlers."""
    global _task_repository
    if _task_repository is None:
        _task_repository = TaskRepository()
    return _task_repository
