"""Async HTTP client for the taskman REST API.

Wraps aiohttp with JSON request bodies and typed errors. There is no retry;
callers decide whether a failure is fatal.
"""

import asyncio
import json
import logging
import time
from http import HTTPStatus
from typing import Any, Protocol
from urllib.parse import quote, urlencode

import aiohttp

from taskman_mcp.exceptions import APIConnectionError, APIError
from taskman_mcp.metrics import MetricsSink, NullMetrics

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
HEALTH_PATH = "/health"


class TaskmanAPI(Protocol):
    """The four HTTP verbs the handlers rely on."""

    async def get(self, path: str) -> bytes: ...

    async def post(self, path: str, body: Any) -> bytes: ...

    async def put(self, path: str, body: Any) -> bytes: ...

    async def delete(self, path: str) -> bytes: ...


def _reason(status: int, fallback: str | None) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return fallback or "Unknown Status"


def _segment(value: str) -> str:
    return quote(value, safe="")


def tasks_path(**filters: Any) -> str:
    """``/api/v1/tasks`` with non-empty filters as query parameters."""
    query = {k: str(v) for k, v in filters.items() if v not in (None, "")}
    path = f"{API_PREFIX}/tasks"
    return f"{path}?{urlencode(query)}" if query else path


def task_path(task_id: str) -> str:
    return f"{API_PREFIX}/tasks/{_segment(task_id)}"


def task_notes_path(task_id: str) -> str:
    return f"{API_PREFIX}/tasks/{_segment(task_id)}/notes"


def projects_path() -> str:
    return f"{API_PREFIX}/projects"


def project_path(project_id: str) -> str:
    return f"{API_PREFIX}/projects/{_segment(project_id)}"


def project_tasks_path(project_id: str) -> str:
    return f"{API_PREFIX}/projects/{_segment(project_id)}/tasks"


def endpoint_template(path: str) -> str:
    """Route template for a request path, used as a metrics label.

    Identifier segments under ``/api/v1`` are replaced with ``{id}`` and the
    query string is dropped, e.g. ``/api/v1/tasks/abc/notes?x=1`` becomes
    ``/api/v1/tasks/{id}/notes``.
    """
    bare = path.split("?", 1)[0]
    if not bare.startswith(API_PREFIX + "/"):
        return bare
    parts = bare[len(API_PREFIX) + 1:].split("/")
    templated = [p if i % 2 == 0 else "{id}" for i, p in enumerate(parts)]
    return API_PREFIX + "/" + "/".join(templated)


class APIClient:
    """aiohttp-based client issuing JSON requests against a base URL.

    The session is created on first use inside the running event loop and
    closed by ``close()`` unless it was supplied by the caller.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        metrics: MetricsSink | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, e.g. ``http://localhost:8080``.
            timeout: Total seconds allowed per request.
            metrics: Sink for call counts and latencies.
            session: Existing session to reuse. Not closed by this client.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._metrics = metrics or NullMetrics()
        self._session = session
        self._owns_session = session is None
        logger.info("Created API client for %s (timeout %ss)", self._base_url, timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def get(self, path: str) -> bytes:
        return await self._request("GET", path)

    async def post(self, path: str, body: Any) -> bytes:
        return await self._request("POST", path, body)

    async def put(self, path: str, body: Any) -> bytes:
        return await self._request("PUT", path, body)

    async def delete(self, path: str) -> bytes:
        return await self._request("DELETE", path)

    async def _request(self, method: str, path: str, body: Any = None) -> bytes:
        """Perform one HTTP round-trip.

        Args:
            method: HTTP verb.
            path: Path appended to the base URL, including any query string.
            body: Value to JSON-encode, or None for no body.

        Returns:
            The raw response body of a 2xx/3xx response.

        Raises:
            APIError: If the response status is 400 or above.
            APIConnectionError: If the request could not be completed.
        """
        url = self._base_url + path
        endpoint = endpoint_template(path)
        logger.debug("Making API request: %s %s", method, url)

        headers: dict[str, str] = {}
        data: bytes | None = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        self._metrics.increment("api_calls", endpoint=endpoint)
        start = time.monotonic()
        try:
            async with self._get_session().request(
                method, url, data=data, headers=headers
            ) as resp:
                payload = await resp.read()
                status = resp.status
                reason = resp.reason
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._metrics.increment("api_errors", endpoint=endpoint, status="transport")
            logger.error("HTTP request failed: %s %s: %r", method, url, e)
            raise APIConnectionError(e) from e
        finally:
            self._metrics.observe_latency("api_latency", time.monotonic() - start, endpoint=endpoint)

        logger.debug(
            "API request completed: %s %s status=%d response_size=%d",
            method, url, status, len(payload),
        )

        if status >= 400:
            self._metrics.increment("api_errors", endpoint=endpoint, status=status)
            logger.warning("API request failed: %s %s status=%d", method, url, status)
            raise APIError(status, _reason(status, reason), payload)

        return payload
