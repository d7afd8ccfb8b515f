"""Error handling utilities."""

from typing import Optional


class PMSError(Exception):
    """Base exception for the PMS tasks service."""
    pass


class DataSourceError(PMSError):
    """Data source request failed."""
    pass


class DataSourceUnavailableError(DataSourceError):
    """Network or transport failure talking to the data source."""
    pass


class UnexpectedStatusError(DataSourceError):
    """Data source answered with a status code the operation does not expect."""

    def __init__(self, message: str, status_code: int, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TaskNotFoundError(DataSourceError):
    """Update or delete of an unknown task id."""

    def __init__(self, task_id: int):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class TaskValidationError(PMSError):
    """Form values failed validation; nothing was submitted."""

    def __init__(self, field_errors: dict[str, list[str]]):
        fields = ", ".join(sorted(field_errors))
        super().__init__(f"Invalid task fields: {fields}")
        self.field_errors = field_errors


class BulkOperationError(PMSError):
    """Some requests of a bulk action failed."""

    def __init__(self, action: str, failed: int, total: int):
        super().__init__(f"Bulk {action} failed for {failed} of {total} tasks")
        self.action = action
        self.failed = failed
        self.total = total
