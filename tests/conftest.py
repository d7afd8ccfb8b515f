"""Shared pytest fixtures and configuration."""

import os
import pytest
import pytest_asyncio
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("LOG_FORMAT", "text")

from src.data.seed import SEED_TASKS
from src.models.task import Task
from src.services.pms_client import PMSClient
from src.services.query_cache import QueryCache
from src.services.task_board import TaskBoard
from src.services.task_repository import TaskRepository
from src.utils.config import AppConfig
from tests.utils.helpers import make_transport


@pytest.fixture
def repository():
    """Fresh in-memory repository with the seed records."""
    return TaskRepository()


@pytest.fixture
def sample_tasks():
    """The seed tasks as models."""
    return [Task(**raw) for raw in SEED_TASKS]


@pytest.fixture
def test_config():
    return AppConfig(base_url="http://pms.test", http_timeout_seconds=5, page_size=10)


@pytest.fixture
def request_log():
    return []


@pytest_asyncio.fixture
async def pms_client(repository, test_config, request_log):
    """Client wired to the dispatcher through a mock transport."""
    async with PMSClient(test_config, transport=make_transport(repository, request_log)) as client:
        yield client


@pytest.fixture
def query_cache():
    return QueryCache()


@pytest.fixture
def task_board(pms_client, query_cache):
    return TaskBoard(pms_client, query_cache)


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture
def valid_task_form():
    """Values a user would submit in the new task form."""
    return {
        "title": "File Motion",
        "description": "File the motion to dismiss with the court.",
        "assigned_to": 2,
        "status": "Due",
        "due_date": "2024-07-01T17:00:00Z",
        "priority": "High",
        "case": 1,
        "matter": "",
    }
