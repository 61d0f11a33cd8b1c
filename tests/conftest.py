"""Pytest fixtures for taskman-mcp tests."""

import json
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest

from taskman_mcp.exceptions import APIError

FROZEN_NOW = datetime(2024, 1, 20, 12, 0, 0, tzinfo=timezone.utc)


class FakeAPIClient:
    """In-memory stand-in for APIClient.

    Responses are keyed by ``(method, path)``. A path with a query string
    falls back to the bare path when no exact entry exists. A value may be
    raw bytes, any JSON-serialisable object, or an exception to raise.
    Unknown paths answer with a 404 APIError.
    """

    def __init__(self) -> None:
        self.responses: dict[tuple[str, str], Any] = {}
        self.calls: list[tuple[str, str, Any]] = []
        self.queued: dict[tuple[str, str], list[Any]] = {}

    def respond(self, method: str, path: str, value: Any) -> None:
        self.responses[(method, path)] = value

    def respond_in_turn(self, method: str, path: str, *values: Any) -> None:
        """Answer successive calls to one path with successive values."""
        self.queued[(method, path)] = list(values)

    def paths(self, method: str | None = None) -> list[str]:
        """Requested paths, optionally only those of one verb."""
        return [p for m, p, _ in self.calls if method is None or m == method]

    async def _handle(self, method: str, path: str, body: Any = None) -> bytes:
        self.calls.append((method, path, body))
        if self.queued.get((method, path)):
            return self._answer(self.queued[(method, path)].pop(0))

        key = (method, path)
        if key not in self.responses:
            key = (method, path.split("?", 1)[0])
        if key not in self.responses:
            raise APIError(404, "Not Found", b'{"error": "not found"}')

        return self._answer(self.responses[key])

    def _answer(self, value: Any) -> bytes:
        if isinstance(value, Exception):
            raise value
        if isinstance(value, bytes):
            return value
        return json.dumps(value).encode("utf-8")

    async def get(self, path: str) -> bytes:
        return await self._handle("GET", path)

    async def post(self, path: str, body: Any) -> bytes:
        return await self._handle("POST", path, body)

    async def put(self, path: str, body: Any) -> bytes:
        return await self._handle("PUT", path, body)

    async def delete(self, path: str) -> bytes:
        return await self._handle("DELETE", path)


@pytest.fixture
def fake_client() -> FakeAPIClient:
    """Create an empty fake API client.

    Returns:
        FakeAPIClient with no canned responses.
    """
    return FakeAPIClient()


@pytest.fixture
def now() -> datetime:
    """The frozen evaluation instant, 2024-01-20 12:00 UTC."""
    return FROZEN_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """A clock that always returns the frozen instant."""
    return lambda: FROZEN_NOW


@pytest.fixture
def make_task() -> Callable[..., dict[str, Any]]:
    """Factory for task JSON objects as the API returns them.

    Returns:
        Function taking field overrides and returning a task dict.
    """
    counter = {"n": 0}

    def factory(**overrides: Any) -> dict[str, Any]:
        counter["n"] += 1
        task: dict[str, Any] = {
            "task_id": f"task-{counter['n']}",
            "task_name": f"Task {counter['n']}",
            "status": "Not Started",
            "tags": [],
            "archived": False,
            "created_by": "alice",
            "creation_date": "2024-01-15T10:00:00Z",
        }
        task.update(overrides)
        return task

    return factory


@pytest.fixture
def make_project() -> Callable[..., dict[str, Any]]:
    """Factory for project JSON objects as the API returns them.

    Returns:
        Function taking field overrides and returning a project dict.
    """
    counter = {"n": 0}

    def factory(**overrides: Any) -> dict[str, Any]:
        counter["n"] += 1
        project: dict[str, Any] = {
            "project_id": f"proj-{counter['n']}",
            "project_name": f"Project {counter['n']}",
            "created_by": "alice",
            "creation_date": "2024-01-10T09:00:00Z",
        }
        project.update(overrides)
        return project

    return factory


@pytest.fixture
def sample_tasks(make_task: Callable[..., dict[str, Any]]) -> list[dict[str, Any]]:
    """Three tasks covering the common statuses.

    Returns:
        In Progress (High, overdue), Complete (Low) and Not Started tasks.
    """
    return [
        make_task(
            task_id="t1",
            task_name="Write report",
            status="In Progress",
            priority="High",
            assigned_to="john.doe",
            project_id="p1",
            due_date="2024-01-15T12:00:00Z",
        ),
        make_task(
            task_id="t2",
            task_name="Review draft",
            status="Complete",
            priority="Low",
            assigned_to="jane",
            project_id="p1",
            due_date="2024-01-10T12:00:00Z",
        ),
        make_task(
            task_id="t3",
            task_name="Plan launch",
            status="Not Started",
            project_id="p1",
        ),
    ]


@pytest.fixture
def sample_project(make_project: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    """A project with id p1."""
    return make_project(
        project_id="p1",
        project_name="Launch",
        project_description="Ship the product",
    )
