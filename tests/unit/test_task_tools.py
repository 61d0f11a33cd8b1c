"""Unit tests for the task tools."""

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from taskman_mcp.exceptions import (
    APIConnectionError,
    APIError,
    MissingArgumentError,
    OperationError,
    ValidationError,
)
from taskman_mcp.models import Task
from taskman_mcp.tools import ToolContext
from taskman_mcp.tools.health import handle_health_check
from taskman_mcp.tools.tasks import (
    filter_search_results,
    handle_add_task_note,
    handle_create_task_with_context,
    handle_get_all_tasks,
    handle_get_task_details,
    handle_get_task_overview,
    handle_search_tasks,
    handle_update_task_progress,
)

TASKS = "/api/v1/tasks"
BASE = {"status": "Not Started", "created_by": "alice", "creation_date": "2024-01-15T10:00:00Z"}


@pytest.fixture
def ctx(fake_client: Any, clock: Callable[[], datetime]) -> ToolContext:
    """Tool context over the fake client and frozen clock."""
    return ToolContext(client=fake_client, clock=clock)


class TestHealthCheck:
    """Tests for the health_check tool."""

    def test_healthy(self, ctx: ToolContext, fake_client: Any) -> None:
        """A reachable API should report healthy with the raw body."""
        fake_client.respond("GET", "/health", b'{"status":"ok"}')
        result = asyncio.run(handle_health_check(ctx, {}))

        assert result.text == "API Health Check: healthy"
        assert result.metadata["status"] == "healthy"
        assert result.metadata["api_response"] == '{"status":"ok"}'
        assert result.metadata["timestamp"] == "2024-01-20T12:00:00Z"

    def test_unhealthy(self, ctx: ToolContext, fake_client: Any) -> None:
        """A failing API should be reported, not raised."""
        fake_client.respond("GET", "/health", APIConnectionError(OSError("refused")))
        result = asyncio.run(handle_health_check(ctx, {}))

        assert result.text.startswith("Health check failed: request failed")
        assert result.metadata["status"] == "unhealthy"


class TestCreateTaskWithContext:
    """Tests for the create_task_with_context tool."""

    def test_missing_initial_note_makes_no_calls(self, ctx: ToolContext, fake_client: Any) -> None:
        """A missing required argument should fail before any HTTP request."""
        with pytest.raises(MissingArgumentError, match="initial_note is required"):
            asyncio.run(handle_create_task_with_context(ctx, {
                "task_name": "Write docs",
                "created_by": "alice",
            }))
        assert fake_client.calls == []

    def test_empty_string_counts_as_missing(self, ctx: ToolContext, fake_client: Any) -> None:
        """Empty strings should be treated like absent arguments."""
        with pytest.raises(MissingArgumentError, match="created_by is required"):
            asyncio.run(handle_create_task_with_context(ctx, {
                "task_name": "Write docs",
                "initial_note": "plan",
                "created_by": "",
            }))
        assert fake_client.calls == []

    def test_invalid_status(self, ctx: ToolContext, fake_client: Any) -> None:
        """Unknown statuses should be rejected with the valid list."""
        with pytest.raises(ValidationError, match="invalid status 'Done'"):
            asyncio.run(handle_create_task_with_context(ctx, {
                "task_name": "x", "initial_note": "y", "created_by": "z", "status": "Done",
            }))
        assert fake_client.calls == []

    def test_creates_task_and_note(
        self, ctx: ToolContext, fake_client: Any, make_task: Callable[..., dict[str, Any]]
    ) -> None:
        """The task and its initial note should both be posted."""
        fake_client.respond("POST", TASKS, make_task(task_id="t9", task_name="Write docs"))
        fake_client.respond("POST", f"{TASKS}/t9/notes", {
            "note_id": "n1", "task_id": "t9", "note": "Outline first", "created_by": "alice",
        })

        result = asyncio.run(handle_create_task_with_context(ctx, {
            "task_name": "Write docs",
            "initial_note": "Outline first",
            "created_by": "alice",
            "priority": "High",
            "due_date": "2024-02-01",
        }))

        method, path, body = fake_client.calls[0]
        assert (method, path) == ("POST", TASKS)
        assert body == {
            "task_name": "Write docs",
            "status": "Not Started",
            "priority": "High",
            "due_date": "2024-02-01T00:00:00Z",
            "created_by": "alice",
        }
        assert fake_client.calls[1][2] == {"note": "Outline first", "created_by": "alice"}
        assert "Task Created Successfully" in result.text
        assert "Initial Note Added:\nOutline first" in result.text
        assert result.metadata["success"] is True
        assert result.metadata["note_added"] is True
        assert result.metadata["task"]["task_id"] == "t9"

    def test_unparseable_due_date_is_dropped(
        self, ctx: ToolContext, fake_client: Any, make_task: Callable[..., dict[str, Any]]
    ) -> None:
        """An unparseable due date should be omitted rather than fail."""
        fake_client.respond("POST", TASKS, make_task(task_id="t9"))
        fake_client.respond("POST", f"{TASKS}/t9/notes", {"note_id": "n1", "task_id": "t9", "note": "x"})

        asyncio.run(handle_create_task_with_context(ctx, {
            "task_name": "x", "initial_note": "y", "created_by": "z", "due_date": "qqq zzz xyzzy",
        }))
        assert "due_date" not in fake_client.calls[0][2]

    def test_note_failure_is_tolerated(
        self, ctx: ToolContext, fake_client: Any, make_task: Callable[..., dict[str, Any]]
    ) -> None:
        """A failed note should still report the task as created."""
        fake_client.respond("POST", TASKS, make_task(task_id="t9"))
        fake_client.respond("POST", f"{TASKS}/t9/notes", APIError(500, "Internal Server Error"))

        result = asyncio.run(handle_create_task_with_context(ctx, {
            "task_name": "x", "initial_note": "y", "created_by": "z",
        }))
        assert result.metadata["success"] is True
        assert result.metadata["note_added"] is False
        assert result.metadata["initial_note"] is None

    def test_task_failure_aborts(self, ctx: ToolContext, fake_client: Any) -> None:
        """A failed task creation should raise a wrapped error."""
        fake_client.respond("POST", TASKS, APIError(400, "Bad Request"))
        with pytest.raises(OperationError, match="failed to create task: API error 400"):
            asyncio.run(handle_create_task_with_context(ctx, {
                "task_name": "x", "initial_note": "y", "created_by": "z",
            }))
        assert fake_client.paths("POST") == [TASKS]


class TestGetTaskDetails:
    """Tests for the get_task_details tool."""

    def test_with_notes_and_project(
        self,
        ctx: ToolContext,
        fake_client: Any,
        sample_tasks: list[dict[str, Any]],
        sample_project: dict[str, Any],
    ) -> None:
        """Notes beyond five should be summarised and the project shown."""
        notes = [
            {"note_id": f"n{i}", "task_id": "t1", "note": f"note {i}", "created_by": "bob",
             "creation_date": f"2024-01-1{i}T00:00:00Z"}
            for i in range(7)
        ]
        fake_client.respond("GET", f"{TASKS}/t1", sample_tasks[0])
        fake_client.respond("GET", f"{TASKS}/t1/notes", notes)
        fake_client.respond("GET", "/api/v1/projects/p1", sample_project)

        result = asyncio.run(handle_get_task_details(ctx, {"task_id": "t1"}))

        assert "Notes (7):" in result.text
        assert "- [2024-01-10T00:00:00Z] note 0 (by bob)" in result.text
        assert "note 5" not in result.text
        assert "... and 2 more notes" in result.text
        assert "Project: Launch" in result.text
        assert "This task is overdue and needs immediate attention" in result.text
        assert result.metadata["note_count"] == 7
        assert result.metadata["has_project"] is True

    def test_secondary_failures_degrade(
        self, ctx: ToolContext, fake_client: Any, sample_tasks: list[dict[str, Any]]
    ) -> None:
        """Failed notes and project fetches should leave empty values."""
        fake_client.respond("GET", f"{TASKS}/t1", sample_tasks[0])
        fake_client.respond("GET", f"{TASKS}/t1/notes", APIConnectionError(TimeoutError()))
        fake_client.respond("GET", "/api/v1/projects/p1", APIError(404, "Not Found"))

        result = asyncio.run(handle_get_task_details(ctx, {"task_id": "t1"}))

        assert "No notes available" in result.text
        assert result.metadata["note_count"] == 0
        assert result.metadata["has_project"] is False
        assert result.metadata["project"] is None

    def test_missing_task(self, ctx: ToolContext, fake_client: Any) -> None:
        """An unknown task should fail with a wrapped not-found error."""
        with pytest.raises(OperationError, match="failed to get task: API error 404: Not Found"):
            asyncio.run(handle_get_task_details(ctx, {"task_id": "nope"}))


class TestUpdateTaskProgress:
    """Tests for the update_task_progress tool."""

    def _note(self) -> dict[str, Any]:
        return {"note_id": "n1", "task_id": "t3", "note": "Kicked off", "created_by": "bob"}

    def test_start_work(
        self,
        ctx: ToolContext,
        fake_client: Any,
        sample_tasks: list[dict[str, Any]],
    ) -> None:
        """Moving to In Progress should change status and stamp the start date."""
        current = sample_tasks[2]
        fake_client.respond("GET", f"{TASKS}/t3", current)
        fake_client.respond("PUT", f"{TASKS}/t3", {**current, "status": "In Progress"})
        fake_client.respond("POST", f"{TASKS}/t3/notes", self._note())

        result = asyncio.run(handle_update_task_progress(ctx, {
            "task_id": "t3",
            "progress_note": "Kicked off",
            "updated_by": "bob",
            "status": "In Progress",
        }))

        put_body = next(body for m, _, body in fake_client.calls if m == "PUT")
        assert put_body == {
            "status": "In Progress",
            "start_date": "2024-01-20T12:00:00Z",
            "last_updated_by": "bob",
        }
        assert result.metadata["changes_made"] == [
            "Status: Not Started → In Progress",
            "Start date set",
        ]
        assert "Work has begun on this task" in result.metadata["insights"]
        assert result.metadata["update_success"] is True
        assert result.metadata["note_added"] is True

    def test_complete_stamps_completion_date(
        self, ctx: ToolContext, fake_client: Any, sample_tasks: list[dict[str, Any]]
    ) -> None:
        """Completing a task should set completion_date."""
        current = sample_tasks[0]
        fake_client.respond("GET", f"{TASKS}/t1", current)
        fake_client.respond("PUT", f"{TASKS}/t1", {**current, "status": "Complete"})
        fake_client.respond("POST", f"{TASKS}/t1/notes", self._note())

        result = asyncio.run(handle_update_task_progress(ctx, {
            "task_id": "t1", "progress_note": "Done", "updated_by": "bob", "status": "Complete",
        }))

        put_body = next(body for m, _, body in fake_client.calls if m == "PUT")
        assert put_body["completion_date"] == "2024-01-20T12:00:00Z"
        assert "Completion date set" in result.metadata["changes_made"]
        assert "Task completed after due date" in result.metadata["insights"]

    def test_no_changes_skips_put(
        self, ctx: ToolContext, fake_client: Any, sample_tasks: list[dict[str, Any]]
    ) -> None:
        """Repeating the current values should only add the note."""
        started = {**sample_tasks[0], "start_date": "2024-01-12T09:00:00Z"}
        fake_client.respond("GET", f"{TASKS}/t1", started)
        fake_client.respond("POST", f"{TASKS}/t1/notes", self._note())

        result = asyncio.run(handle_update_task_progress(ctx, {
            "task_id": "t1",
            "progress_note": "Still going",
            "updated_by": "bob",
            "status": "In Progress",
            "priority": "High",
        }))

        assert fake_client.paths("PUT") == []
        assert result.metadata["changes_made"] == []
        assert "No field changes made (progress note added)" in result.text

    def test_reassign_and_reprioritise(
        self, ctx: ToolContext, fake_client: Any, sample_tasks: list[dict[str, Any]]
    ) -> None:
        """Priority and assignee changes should be listed with old and new values."""
        current = sample_tasks[2]
        fake_client.respond("GET", f"{TASKS}/t3", current)
        fake_client.respond("PUT", f"{TASKS}/t3", {**current, "priority": "High", "assigned_to": "bob"})
        fake_client.respond("POST", f"{TASKS}/t3/notes", self._note())

        result = asyncio.run(handle_update_task_progress(ctx, {
            "task_id": "t3",
            "progress_note": "Escalated",
            "updated_by": "ann",
            "priority": "High",
            "assigned_to": "bob",
        }))

        assert result.metadata["changes_made"] == ["Priority:  → High", "Assigned to:  → bob"]
        assert "Task priority elevated to High" in result.metadata["insights"]
        assert "Assigned to: bob" in result.text

    def test_missing_arguments(self, ctx: ToolContext, fake_client: Any) -> None:
        """Missing required fields should fail without HTTP calls."""
        with pytest.raises(MissingArgumentError, match="progress_note is required"):
            asyncio.run(handle_update_task_progress(ctx, {"task_id": "t1", "updated_by": "bob"}))
        assert fake_client.calls == []


class TestSearchTasks:
    """Tests for search_tasks and its client-side filters."""

    def _tasks(self) -> list[Task]:
        return [
            Task(task_id="1", task_name="Fix login bug", due_date="2024-01-10T09:00:00Z", **BASE),
            Task(task_id="2", task_name="Write docs", task_description="login flow",
                 due_date="2024-01-15T23:30:00Z", **BASE),
            Task(task_id="3", task_name="Plan party", **BASE),
            Task(task_id="4", task_name="Login audit", due_date="2024-01-20T00:00:00Z", **BASE),
        ]

    def test_text_is_case_sensitive_substring(self) -> None:
        """Name or description must contain the text exactly."""
        results = filter_search_results(self._tasks(), search_text="login")
        assert [t.task_id for t in results] == ["1", "2"]

    def test_due_range_includes_whole_end_day(self) -> None:
        """The upper bound should include the entire end day."""
        results = filter_search_results(
            self._tasks(), due_date_from="2024-01-11", due_date_to="2024-01-15"
        )
        assert [t.task_id for t in results] == ["2", "3"]

    def test_limit(self) -> None:
        """A positive limit should cap the results."""
        assert len(filter_search_results(self._tasks(), limit=2)) == 2

    def test_query_and_report(
        self, ctx: ToolContext, fake_client: Any, sample_tasks: list[dict[str, Any]]
    ) -> None:
        """Filters should reach the API and results should be summarised."""
        fake_client.respond("GET", TASKS, sample_tasks)

        result = asyncio.run(handle_search_tasks(ctx, {
            "status": "In Progress",
            "search_text": "report",
            "sort_by": "due_date",
            "sort_order": "asc",
        }))

        path = fake_client.paths("GET")[0]
        assert path == (
            f"{TASKS}?status=In+Progress&search=report&sort_by=due_date&sort_order=asc"
        )
        assert "Found: 1 tasks" in result.text
        assert "- Status: In Progress" in result.text
        assert "Overdue Tasks (1):" in result.text
        assert result.metadata["total_results"] == 1
        assert "Found exactly one matching task" in result.metadata["insights"]

    def test_no_results(self, ctx: ToolContext, fake_client: Any) -> None:
        """An empty result should suggest broadening the search."""
        fake_client.respond("GET", TASKS, [])
        result = asyncio.run(handle_search_tasks(ctx, {}))

        assert "Found: 0 tasks" in result.text
        assert "Try broadening your search criteria" in result.metadata["suggestions"]


class TestOverviewAndListing:
    """Tests for get_task_overview and get_all_tasks."""

    def test_overview(
        self, ctx: ToolContext, fake_client: Any, make_task: Callable[..., dict[str, Any]]
    ) -> None:
        """The overview should count overdue and recently created tasks."""
        tasks = [
            make_task(status="In Progress", due_date="2024-01-18T00:00:00Z", project_id="p1"),
            make_task(status="Not Started", creation_date="2024-01-20T08:00:00Z"),
            make_task(status="Not Started"),
        ]
        fake_client.respond("GET", TASKS, tasks)
        fake_client.respond("GET", "/api/v1/projects", APIError(503, "Service Unavailable"))

        result = asyncio.run(handle_get_task_overview(ctx, {"assigned_to": "ann"}))

        assert fake_client.paths("GET")[0] == f"{TASKS}?assigned_to=ann"
        assert "Total Tasks: 3" in result.text
        assert "Overdue Tasks (1):" in result.text
        assert "- Tasks created in last 24h: 1" in result.text
        assert "More than half of tasks haven't been started yet" in result.metadata["insights"]
        assert result.metadata["project_summary"] == {"p1": 1}
        assert result.metadata["projects"] == []

    def test_all_tasks_empty(self, ctx: ToolContext, fake_client: Any) -> None:
        """No tasks should produce the getting-started message."""
        fake_client.respond("GET", TASKS, b"null")
        result = asyncio.run(handle_get_all_tasks(ctx, {}))
        assert result.text == "No tasks found.\n\nCreate your first task to get started!\n"
        assert result.metadata["total_count"] == 0

    def test_all_tasks_capped(
        self, ctx: ToolContext, fake_client: Any, make_task: Callable[..., dict[str, Any]]
    ) -> None:
        """More than ten tasks should be summarised with a remainder line."""
        fake_client.respond("GET", TASKS, [make_task() for _ in range(12)])
        result = asyncio.run(handle_get_all_tasks(ctx, {}))

        assert "All Tasks (12)" in result.text
        assert "- Unset: 12" in result.text
        assert "... and 2 more tasks" in result.text


class TestAddTaskNote:
    """Tests for the add_task_note tool."""

    def test_adds_note(
        self, ctx: ToolContext, fake_client: Any, sample_tasks: list[dict[str, Any]]
    ) -> None:
        """The task should be verified before the note is posted."""
        fake_client.respond("GET", f"{TASKS}/t1", sample_tasks[0])
        fake_client.respond("POST", f"{TASKS}/t1/notes", {
            "note_id": "n5", "task_id": "t1", "note": "FYI", "created_by": "bob",
        })

        result = asyncio.run(handle_add_task_note(ctx, {
            "task_id": "t1", "note": "FYI", "created_by": "bob",
        }))

        assert [m for m, _, _ in fake_client.calls] == ["GET", "POST"]
        assert "Note Added Successfully" in result.text
        assert result.metadata["note_id"] == "n5"

    def test_unknown_task_posts_nothing(self, ctx: ToolContext, fake_client: Any) -> None:
        """A missing task should abort before the note is posted."""
        with pytest.raises(OperationError, match="failed to verify task exists"):
            asyncio.run(handle_add_task_note(ctx, {
                "task_id": "ghost", "note": "FYI", "created_by": "bob",
            }))
        assert fake_client.paths("POST") == []
