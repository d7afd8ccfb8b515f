"""Async HTTP client for the PMS data source."""

from typing import Any, Optional

import httpx

from src.models.case import Case
from src.models.employee import Employee
from src.models.matter import Matter
from src.models.task import Task
from src.utils.config import AppConfig
from src.utils.errors import (
    DataSourceUnavailableError,
    TaskNotFoundError,
    UnexpectedStatusError,
)
from src.utils.logging import get_correlation_id, get_structured_logger, timed
from src.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)


class PMSClient:
    """
    Thin wrapper over httpx.AsyncClient for the /pms/ endpoints.

    Usage:
        async with PMSClient(config) as client:
            tasks = await client.list_tasks()

    Every method checks the one status code its operation succeeds with;
    anything else raises UnexpectedStatusError. 404 on update/delete raises
    TaskNotFoundError and transport failures raise DataSourceUnavailableError.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or AppConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "PMSClient":
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.http_timeout_seconds,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        expected_status: int,
        json_body: Optional[dict] = None,
        task_id: Optional[int] = None,
    ) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("PMSClient must be used as an async context manager")

        headers = {}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers[LoggingConfig.LOG_CORRELATION_ID_HEADER] = correlation_id

        try:
            response = await self._client.request(method, path, json=json_body, headers=headers)
        except httpx.TransportError as e:
            logger.error(
                "Data source unreachable",
                method=method,
                path=path,
                error=str(e)
            )
            raise DataSourceUnavailableError(f"{method} {path} failed: {e}") from e

        if response.status_code == expected_status:
            return response

        if response.status_code == 404 and task_id is not None:
            raise TaskNotFoundError(task_id)

        logger.warning(
            "Unexpected status from data source",
            method=method,
            path=path,
            status_code=response.status_code,
            expected_status=expected_status
        )
        raise UnexpectedStatusError(
            f"HTTP error! Status: {response.status_code}",
            status_code=response.status_code,
            body=response.text
        )

    @timed("pms_client.list_tasks")
    async def list_tasks(self) -> list[Task]:
        response = await self._request("GET", "/pms/tasks/", 200)
        return [Task(**raw) for raw in response.json()]

    async def create_task(self, values: dict[str, Any]) -> Task:
        response = await self._request("POST", "/pms/tasks/", 201, json_body=values)
        return Task(**response.json())

    async def update_task(self, task_id: int, values: dict[str, Any]) -> Task:
        response = await self._request("PUT", f"/pms/tasks/{task_id}", 200, json_body=values, task_id=task_id)
        return Task(**response.json())

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"/pms/tasks/{task_id}", 204, task_id=task_id)

    async def list_cases(self) -> list[Case]:
        response = await self._request("GET", "/pms/cases/", 200)
        return [Case(**raw) for raw in response.json()]

    async def list_matters(self) -> list[Matter]:
        response = await self._request("GET", "/pms/matters/", 200)
        return [Matter(**raw) for raw in response.json()]

    async def list_employees(self) -> list[Employee]:
        response = await self._request("GET", "/pms/employees/", 200)
        return [Employee(**raw) for raw in response.json()]
