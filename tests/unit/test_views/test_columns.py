"""Tests for task table columns and formatting."""

import pytest
from datetime import datetime, timezone
from src.models.task import Priority, Task
from src.views.columns import (
    TASK_COLUMNS,
    format_date,
    format_long_date,
    format_status,
    header_labels,
    priority_color,
    render_row,
    status_badge,
)


@pytest.mark.unit
def test_header_labels():
    """Test column order and labels of the task table."""
    assert header_labels() == [
        "", "Task Name", "Description", "Case", "Created On", "Due Date", "Assigned To", "Status",
    ]
    assert [column.key for column in TASK_COLUMNS][0] == "select"


@pytest.mark.unit
def test_format_dates():
    moment = datetime(2024, 6, 10, 17, 0, tzinfo=timezone.utc)

    assert format_date(moment) == "Monday, June 10"
    assert format_long_date(moment) == "June 10, 2024"
    assert format_date(None) == ""
    assert format_long_date(None) == ""


@pytest.mark.unit
@pytest.mark.parametrize("status,label,color", [
    ("Done", "Completed", "green"),
    ("over_due", "Overdue", "red"),
    ("In Progress", "In Progress", "blue"),
    ("pending", "Due", "yellow"),
    ("Blocked", "Blocked", "gray"),
    (None, "Unknown", "gray"),
])
def test_status_badge(status, label, color):
    """Test badges for canonical, aliased and free-form statuses."""
    badge = status_badge(status)

    assert badge.label == label
    assert badge.color == color


@pytest.mark.unit
def test_priority_color():
    assert priority_color(Priority.HIGH) == "red"
    assert priority_color(Priority.LOW) == "blue"
    assert priority_color(None) == "gray"


@pytest.mark.unit
def test_render_row(sample_tasks):
    """Test one row renders through the column renderers."""
    row = render_row(sample_tasks[0])

    assert row["select"] == ""
    assert row["title"] == "Prepare Report"
    assert row["due_date"] == "Monday, June 10"
    assert row["status"] == format_status("In Progress")


@pytest.mark.unit
def test_render_row_missing_values():
    row = render_row(Task(id=1, title="Bare", status=None))

    assert row["description"] == ""
    assert row["created_at"] == ""
    assert row["status"] == "Unknown"
