"""Task table columns and display formatting."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from src.models.task import Priority, Task, TaskStatus, normalize_status


@dataclass(frozen=True)
class StatusBadge:
    label: str
    color: str


STATUS_BADGES: dict[str, StatusBadge] = {
    TaskStatus.DUE.value: StatusBadge("Due", "yellow"),
    TaskStatus.IN_PROGRESS.value: StatusBadge("In Progress", "blue"),
    TaskStatus.DONE.value: StatusBadge("Completed", "green"),
    TaskStatus.OVER_DUE.value: StatusBadge("Overdue", "red"),
}

PRIORITY_COLORS: dict[Priority, str] = {
    Priority.HIGH: "red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "blue",
}

UNKNOWN_COLOR = "gray"


def format_date(value: Optional[datetime]) -> str:
    """Table date, e.g. 'Monday, June 10'."""
    if value is None:
        return ""
    return f"{value:%A}, {value:%B} {value.day}"


def format_long_date(value: Optional[datetime]) -> str:
    """Detail view date, e.g. 'June 10, 2024'."""
    if value is None:
        return ""
    return f"{value:%B} {value.day}, {value.year}"


def status_badge(status: Optional[str]) -> StatusBadge:
    """Badge for a status; free-form statuses get a gray badge with their own text."""
    canonical = normalize_status(status)
    badge = STATUS_BADGES.get(canonical or "")
    if badge:
        return badge
    return StatusBadge(status or "Unknown", UNKNOWN_COLOR)


def format_status(status: Optional[str]) -> str:
    return status_badge(status).label


def priority_color(priority: Optional[Priority]) -> str:
    return PRIORITY_COLORS.get(priority, UNKNOWN_COLOR) if priority else UNKNOWN_COLOR


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    renderer: Callable[[Any], str] = _text


TASK_COLUMNS: tuple[Column, ...] = (
    Column("select", "", lambda _: ""),
    Column("title", "Task Name"),
    Column("description", "Description"),
    Column("case_number", "Case"),
    Column("created_at", "Created On", format_date),
    Column("due_date", "Due Date", format_date),
    Column("assignee_name", "Assigned To"),
    Column("status", "Status", format_status),
)


def render_row(task: Task, columns: tuple[Column, ...] = TASK_COLUMNS) -> dict[str, str]:
    """Cell text for each column of one task."""
    return {
        column.key: column.renderer(getattr(task, column.key, None))
        for column in columns
    }


def header_labels(columns: tuple[Column, ...] = TASK_COLUMNS) -> list[str]:
    return [column.label for column in columns]
