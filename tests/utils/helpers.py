"""Test helper functions."""

import json
from typing import Dict, Any, Optional

import httpx

from api.pms import handle_request


def create_request(
    method: str = "GET",
    path: str = "/pms/tasks/",
    body: Any = None,
    headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Create a serverless request dict for testing."""
    if headers is None:
        headers = {
            "content-type": "application/json"
        }

    if body is None:
        raw_body = ""
    elif isinstance(body, (dict, list)):
        raw_body = json.dumps(body)
    else:
        raw_body = body

    return {
        "method": method,
        "path": path,
        "headers": headers,
        "body": raw_body,
        "query": {}
    }


def response_json(response: Dict[str, Any]) -> Any:
    """Decode the JSON body of a dispatcher response."""
    return json.loads(response["body"]) if response["body"] else None


def make_transport(repository, calls=None, fail=None) -> httpx.MockTransport:
    """
    httpx transport that answers through the real request dispatcher.

    `calls` collects (method, path) tuples; `fail(request)` may return a
    status code to answer with instead of dispatching.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append((request.method, request.url.path))
        if fail is not None:
            status = fail(request)
            if status:
                return httpx.Response(status, json={"error": "Internal Server Error"})
        response = handle_request(
            {
                "method": request.method,
                "path": request.url.path,
                "headers": dict(request.headers),
                "body": request.content.decode("utf-8"),
                "query": dict(request.url.params),
            },
            repository,
        )
        return httpx.Response(
            response["statusCode"],
            headers=response["headers"],
            content=response["body"].encode("utf-8"),
        )

    return httpx.MockTransport(handler)
