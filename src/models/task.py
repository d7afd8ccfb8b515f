"""Task models."""

from enum import Enum
from typing import Optional, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.utils.errors import TaskValidationError


class TaskStatus(str, Enum):
    """Canonical task statuses."""
    DUE = "Due"
    IN_PROGRESS = "In Progress"
    DONE = "Done"
    OVER_DUE = "Over Due"


class Priority(str, Enum):
    """Task priority levels."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Alternate spellings seen in sample data and older clients
STATUS_ALIASES: dict[str, TaskStatus] = {
    "due": TaskStatus.DUE,
    "pending": TaskStatus.DUE,
    "in progress": TaskStatus.IN_PROGRESS,
    "in_progress": TaskStatus.IN_PROGRESS,
    "in-progress": TaskStatus.IN_PROGRESS,
    "done": TaskStatus.DONE,
    "completed": TaskStatus.DONE,
    "over due": TaskStatus.OVER_DUE,
    "over_due": TaskStatus.OVER_DUE,
    "overdue": TaskStatus.OVER_DUE,
}


def normalize_status(value: Optional[str]) -> Optional[str]:
    """Map a status alias onto the canonical vocabulary; unknown values pass through."""
    if value is None:
        return None
    if isinstance(value, TaskStatus):
        return value.value
    canonical = STATUS_ALIASES.get(str(value).strip().lower())
    return canonical.value if canonical else value


def normalize_priority(value: Any) -> Any:
    """Case-insensitive priority lookup; empty strings become None."""
    if value is None or isinstance(value, Priority):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        for priority in Priority:
            if priority.value.lower() == value.strip().lower():
                return priority
    return value


def is_completed_status(status: Optional[str]) -> bool:
    """True when the status means the task is done."""
    return (status or "").strip().lower() == TaskStatus.DONE.value.lower()


class Task(BaseModel):
    """Task record as stored by the data source."""
    model_config = ConfigDict(extra="allow")

    id: int = Field(..., description="Server-assigned task ID")
    title: str = Field(..., description="Task name")
    description: Optional[str] = Field(None, description="Task description")
    case: Optional[int] = Field(None, description="Associated case ID")
    case_number: Optional[str] = Field(None, description="Associated case number")
    matter: Optional[int] = Field(None, description="Associated matter ID")
    created_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    assigned_to: Optional[int] = Field(None, description="Assigned employee ID")
    assignee_name: Optional[str] = Field(None, description="Assigned employee name")
    status: Optional[str] = Field(default=TaskStatus.DUE.value, description="Status: Due, In Progress, Done, Over Due")
    priority: Optional[Priority] = Field(None, description="Priority: High, Medium, Low")
    is_new: bool = Field(default=True, description="Unread flag, cleared when the task is viewed")

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        return normalize_status(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: Any) -> Any:
        return normalize_priority(value)

    @property
    def is_completed(self) -> bool:
        return is_completed_status(self.status)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict, the shape sent over the wire."""
        return self.model_dump(mode="json")


class TaskForm(BaseModel):
    """Fields shared by the new-task and edit-task forms."""
    title: str = Field(..., min_length=2, max_length=50)
    description: str = Field(..., min_length=2, max_length=300)
    assigned_to: int = Field(..., description="Employee ID")
    status: str = Field(..., min_length=1)
    due_date: datetime
    priority: Priority
    case: int = Field(..., description="Case ID")
    matter: Optional[int] = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        return normalize_status(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: Any) -> Any:
        return normalize_priority(value)

    @field_validator("matter", mode="before")
    @classmethod
    def _blank_matter(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class TaskCreate(TaskForm):
    """New task form."""
    pass


class TaskEdit(TaskForm):
    """Edit task form (longer title and description allowed)."""
    title: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=2, max_length=500)


def field_errors(error: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by top-level field name."""
    errors: dict[str, list[str]] = {}
    for item in error.errors():
        loc = item.get("loc") or ("__root__",)
        errors.setdefault(str(loc[0]), []).append(item.get("msg", "Invalid value"))
    return errors


def validate_form(schema: type[TaskForm], values: dict[str, Any]) -> TaskForm:
    """Validate form values, raising TaskValidationError with field messages."""
    try:
        return schema(**values)
    except ValidationError as e:
        raise TaskValidationError(field_errors(e))
