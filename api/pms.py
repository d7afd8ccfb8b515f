"""PMS data source endpoints: tasks (CRUD) and read-only reference lists."""

from http.server import BaseHTTPRequestHandler
import json
import re
import time
from typing import Any, Callable, Optional
from urllib.parse import parse_qs, urlsplit

from pydantic import ValidationError

from api.health import health_payload
from src.models.task import field_errors
from src.services.task_repository import TaskRepository, get_task_repository
from src.utils.errors import TaskNotFoundError
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, X-Correlation-ID",
}


class BadRequest(Exception):
    """Request body could not be used."""
    pass


def _list_tasks(repo: TaskRepository, match: re.Match, body: Any) -> tuple[int, Any]:
    return 200, [task.to_payload() for task in repo.list_tasks()]


def _create_task(repo: TaskRepository, match: re.Match, body: Any) -> tuple[int, Any]:
    return 201, repo.create_task(body).to_payload()


def _update_task(repo: TaskRepository, match: re.Match, body: Any) -> tuple[int, Any]:
    return 200, repo.update_task(int(match.group("task_id")), body).to_payload()


def _delete_task(repo: TaskRepository, match: re.Match, body: Any) -> tuple[int, Any]:
    repo.delete_task(int(match.group("task_id")))
    return 204, None


def _list_cases(repo: TaskRepository, match: re.Match, body: Any) -> tuple[int, Any]:
    return 200, [case.model_dump(mode="json") for case in repo.list_cases()]


def _list_matters(repo: TaskRepository, match: re.Match, body: Any) -> tuple[int, Any]:
    return 200, [matter.model_dump(mode="json") for matter in repo.list_matters()]


def _list_employees(repo: TaskRepository, match: re.Match, body: Any) -> tuple[int, Any]:
    return 200, [employee.model_dump(mode="json") for employee in repo.list_employees()]


def _health(repo: TaskRepository, match: re.Match, body: Any) -> tuple[int, Any]:
    return 200, health_payload()


RouteHandler = Callable[[TaskRepository, re.Match, Any], tuple[int, Any]]

# (path pattern, {method: handler})
ROUTES: list[tuple[re.Pattern, dict[str, RouteHandler]]] = [
    (re.compile(r"^/pms/tasks/?$"), {"GET": _list_tasks, "POST": _create_task}),
    (re.compile(r"^/pms/tasks/(?P<task_id>\d+)/?$"), {"PUT": _update_task, "DELETE": _delete_task}),
    (re.compile(r"^/pms/cases/?$"), {"GET": _list_cases}),
    (re.compile(r"^/pms/matters/?$"), {"GET": _list_matters}),
    (re.compile(r"^/pms/employees/?$"), {"GET": _list_employees}),
    (re.compile(r"^/api/health/?$"), {"GET": _health, "POST": _health}),
]


def _header(headers: dict, name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    for key, value in (headers or {}).items():
        if key.lower() == name.lower():
            return value
    return None


def _parse_body(raw_body: Any) -> dict:
    if raw_body is None or raw_body in ("", b""):
        return {}
    if isinstance(raw_body, bytes):
        try:
            raw_body = raw_body.decode("utf-8")
        except UnicodeDecodeError:
            raise BadRequest("Invalid JSON body")
    if isinstance(raw_body, str):
        try:
            raw_body = json.loads(raw_body)
        except json.JSONDecodeError:
            raise BadRequest("Invalid JSON body")
    if not isinstance(raw_body, dict):
        raise BadRequest("Request body must be a JSON object")
    return raw_body


def _response(status: int, payload: Any, correlation_id: str, extra_headers: Optional[dict] = None) -> dict:
    headers = {"Content-Type": "application/json", **CORS_HEADERS}
    headers[LoggingConfig.LOG_CORRELATION_ID_HEADER] = correlation_id
    if extra_headers:
        headers.update(extra_headers)
    return {
        "statusCode": status,
        "headers": headers,
        "body": "" if payload is None else json.dumps(payload),
    }


def handle_request(request: dict, repository: Optional[TaskRepository] = None) -> dict:
    """
    Dispatch one request.

    Takes and returns the serverless request/response dicts
    (method, path, headers, body, query -> statusCode, headers, body).
    """
    repo = repository or get_task_repository()
    method = (request.get("method") or "GET").upper()
    path = urlsplit(request.get("path") or "/").path
    headers = request.get("headers") or {}
    incoming_id = _header(headers, LoggingConfig.LOG_CORRELATION_ID_HEADER)

    with correlation_context(incoming_id) as correlation_id:
        start_time = time.perf_counter()
        response = _dispatch(repo, method, path, request.get("body"), correlation_id)
        logger.info(
            "Request handled",
            method=method,
            path=path,
            status_code=response["statusCode"],
            processing_time_ms=round((time.perf_counter() - start_time) * 1000, 2)
        )
        return response


def _dispatch(repo: TaskRepository, method: str, path: str, raw_body: Any, correlation_id: str) -> dict:
    for pattern, methods in ROUTES:
        match = pattern.match(path)
        if not match:
            continue

        if method == "OPTIONS":
            return _response(204, None, correlation_id)

        route = methods.get(method)
        if route is None:
            allowed = ", ".join(sorted(methods))
            return _response(405, {"error": "Method Not Allowed"}, correlation_id, {"Allow": allowed})

        try:
            body = _parse_body(raw_body) if method in ("POST", "PUT") else None
            status, payload = route(repo, match, body)
            return _response(status, payload, correlation_id)
        except BadRequest as e:
            logger.warning("Rejected request body", method=method, path=path, error=str(e))
            return _response(400, {"error": str(e)}, correlation_id)
        except ValidationError as e:
            details = field_errors(e)
            logger.warning("Invalid task payload", method=method, path=path, fields=sorted(details))
            return _response(400, {"error": "Invalid task", "details": details}, correlation_id)
        except TaskNotFoundError as e:
            logger.info("Task not found", method=method, path=path, task_id=e.task_id)
            return _response(404, {"error": "Task not found"}, correlation_id)
        except Exception as e:
            logger.error(
                f"Error in {method} {path}: {e}",
                method=method,
                path=path,
                error=str(e),
                exc_info=True
            )
            return _response(500, {"error": "Internal Server Error"}, correlation_id)

    return _response(404, {"error": "Not Found"}, correlation_id)


class handler(BaseHTTPRequestHandler):
    """HTTP handler for the PMS endpoints (serverless function or local server)."""

    repository: Optional[TaskRepository] = None

    def _serve(self):
        content_length = int(self.headers.get('Content-Length', 0))
        raw_body = self.rfile.read(content_length) if content_length > 0 else b""
        split = urlsplit(self.path)
        request = {
            "method": self.command,
            "path": split.path,
            "headers": dict(self.headers),
            "body": raw_body,
            "query": {k: v[0] for k, v in parse_qs(split.query).items()},
        }

        response = handle_request(request, self.repository)

        self.send_response(response["statusCode"])
        for name, value in response["headers"].items():
            self.send_header(name, value)
        body = response["body"].encode('utf-8')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        if body:
            self.wfile.write(body)

    def do_GET(self):
        """Handle GET request."""
        self._serve()

    def do_POST(self):
        """Handle POST request."""
        self._serve()

    def do_PUT(self):
        """Handle PUT request."""
        self._serve()

    def do_DELETE(self):
        """Handle DELETE request."""
        self._serve()

    def do_OPTIONS(self):
        """Handle CORS preflight."""
        self._serve()

    def log_message(self, format, *args):
        # Requests are logged by handle_request
        pass
