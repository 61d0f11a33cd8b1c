"""Unit tests for the report formatters."""

from datetime import datetime

from taskman_mcp.formatters.dashboard import (
    format_project_dashboard,
    format_system_dashboard,
    format_user_dashboard,
)
from taskman_mcp.formatters.project import (
    format_project_detail,
    format_project_tasks,
    format_projects_overview,
)
from taskman_mcp.formatters.task import (
    format_task_detail,
    format_tasks_overview,
    format_user_tasks,
)
from taskman_mcp.models import Project, Task, TaskNote


def _task(task_id: str, status: str = "Not Started", **fields: str) -> Task:
    return Task(
        task_id=task_id,
        task_name=fields.pop("task_name", f"Task {task_id}"),
        status=status,
        created_by="alice",
        creation_date="2024-01-15T10:00:00Z",
        **fields,
    )


def _project(**fields: str) -> Project:
    data = {
        "project_id": "p1",
        "project_name": "Launch",
        "created_by": "alice",
        "creation_date": "2024-01-10T09:00:00Z",
    }
    data.update(fields)
    return Project(**data)


class TestTaskDetail:
    """Tests for format_task_detail."""

    def test_fields_without_project(self) -> None:
        """Set fields should be shown and no Project line without a project."""
        task = _task(
            "t1",
            status="In Progress",
            priority="High",
            assigned_to="john.doe",
            due_date="2024-01-15T12:00:00Z",
        )
        text = format_task_detail(task, [], None)

        assert "Status: In Progress" in text
        assert "Priority: High" in text
        assert "Assigned To: john.doe" in text
        assert "Due Date: 2024-01-15T12:00:00Z" in text
        assert "Project:" not in text
        assert "## Notes" not in text

    def test_placeholders(self) -> None:
        """Missing optional fields should render their fixed placeholders."""
        text = format_task_detail(_task("t1"), [], None)

        assert "Priority: None" in text
        assert "Assigned To: Unassigned" in text
        assert "Due Date: No due date" in text
        assert "null" not in text

    def test_project_and_notes(self) -> None:
        """A project line and every note should be rendered when present."""
        notes = [
            TaskNote(note_id="n1", task_id="t1", note="Started", created_by="bob",
                     creation_date="2024-01-16T08:00:00Z"),
            TaskNote(note_id="n2", task_id="t1", note="Halfway", created_by="bob",
                     creation_date="2024-01-17T08:00:00Z"),
        ]
        text = format_task_detail(_task("t1", project_id="p1"), notes, _project())

        assert "Project: Launch (p1)" in text
        assert "## Notes" in text
        assert "- bob (2024-01-16T08:00:00Z): Started" in text
        assert "- bob (2024-01-17T08:00:00Z): Halfway" in text


class TestTasksOverview:
    """Tests for format_tasks_overview."""

    def test_recent_tasks_capped_at_ten(self, now: datetime) -> None:
        """16 tasks should show 10 recent lines and a line for the other 6."""
        tasks = [_task(str(i)) for i in range(16)]
        text = format_tasks_overview(tasks, now)

        recent = text.split("## Recent Tasks\n", 1)[1]
        assert sum(1 for line in recent.splitlines() if line.startswith("- ")) == 10
        assert recent.rstrip().endswith("... and 6 more tasks")
        assert "Total Tasks: 16" in text

    def test_breakdowns(self, now: datetime) -> None:
        """Breakdowns should count by status, priority and assignee."""
        tasks = [
            _task("1", status="Complete", priority="High", assigned_to="ann"),
            _task("2", status="Complete"),
        ]
        text = format_tasks_overview(tasks, now)

        assert "- Complete: 2" in text
        assert "- High: 1" in text
        assert "- None: 1" in text
        assert "- Unassigned: 1" in text

    def test_empty(self, now: datetime) -> None:
        """No tasks should render totals without a Recent Tasks section."""
        text = format_tasks_overview([], now)
        assert "Total Tasks: 0" in text
        assert "## Recent Tasks" not in text


class TestUserTasks:
    """Tests for format_user_tasks."""

    def test_non_standard_status_is_shown(self) -> None:
        """Tasks with an unknown status should get their own section."""
        tasks = [_task("1", status="On Hold", task_name="Paused"), _task("2", status="Review")]
        text = format_user_tasks("bob", tasks)

        assert text.index("## Review (1)") < text.index("## On Hold (1)")
        assert "- Paused (None) - Due: No due date" in text

    def test_no_tasks(self) -> None:
        """A user without tasks should get an explicit message."""
        assert "No tasks assigned to this user." in format_user_tasks("bob", [])


class TestProjectFormatters:
    """Tests for the project formatters."""

    def test_project_detail_completion(self, now: datetime) -> None:
        """Three tasks with one complete should give 33.3% completion."""
        tasks = [_task("1", "In Progress"), _task("2", "Complete"), _task("3", "Not Started")]
        text = format_project_detail(_project(), tasks, now)

        assert "Total Tasks: 3" in text
        assert "Completion: 33.3%" in text

    def test_project_detail_without_tasks(self, now: datetime) -> None:
        """A project without tasks should say so instead of 0% completion."""
        text = format_project_detail(_project(), [], now)
        assert "No tasks in this project yet." in text
        assert "Completion:" not in text

    def test_project_tasks_capped_at_fifteen(self, now: datetime) -> None:
        """The project task list should cap at 15 lines."""
        tasks = [_task(str(i)) for i in range(17)]
        text = format_project_detail(_project(), tasks, now)
        assert "... and 2 more tasks" in text

    def test_overview_truncates_description(self) -> None:
        """A 120 character description should be cut to 100 plus an ellipsis."""
        description = "x" * 120
        text = format_projects_overview([_project(project_description=description)])

        assert f"  *{'x' * 100}...*" in text
        assert "x" * 101 not in text

    def test_overview_short_description_untouched(self) -> None:
        """Descriptions under the cap should not gain an ellipsis."""
        text = format_projects_overview([_project(project_description="Short one")])
        assert "  *Short one*" in text

    def test_project_tasks_truncates_at_150(self) -> None:
        """Task descriptions in project task lists should be cut at 150."""
        task = _task("1", task_description="y" * 151)
        text = format_project_tasks(_project(), [task])
        assert f"  *{'y' * 150}...*" in text


class TestDashboards:
    """Tests for the dashboard formatters."""

    def test_system_dashboard(self, now: datetime) -> None:
        """The system dashboard should show totals and percentage distributions."""
        tasks = [
            _task("1", "Complete", assigned_to="ann"),
            _task("2", "In Progress", assigned_to="ann", due_date="2024-01-01T00:00:00Z"),
            _task("3", "In Progress", assigned_to="bob"),
            _task("4", "Blocked"),
        ]
        text = format_system_dashboard(tasks, [_project()], now)

        assert "Generated: 2024-01-20 12:00:00" in text
        assert "- Total Projects: 1" in text
        assert "- Completion Rate: 25.0%" in text
        assert "- Overdue Tasks: 1" in text
        assert "- In Progress: 2 (50.0%)" in text
        assert "- ann: 2 tasks" in text
        assert "- Launch - Created by alice" in text

    def test_system_dashboard_recent_sections_capped(self, now: datetime) -> None:
        """Recent tasks and projects should stop at 5 with a count of the rest."""
        tasks = [_task(str(i), task_name=f"Job {i}") for i in range(8)]
        projects = [_project(project_id=f"p{i}", project_name=f"Plan {i}") for i in range(6)]

        text = format_system_dashboard(tasks, projects, now)

        recent_tasks = text.split("## Recent Tasks\n", 1)[1].split("\n\n", 1)[0]
        assert recent_tasks.splitlines()[:5] == [
            f"- Job {i} (Not Started) - Unassigned - 2024-01-15T10:00:00Z" for i in range(5)
        ]
        assert recent_tasks.splitlines()[5:] == ["... and 3 more tasks"]
        recent_projects = text.split("## Recent Projects\n", 1)[1]
        assert "- Plan 4 - Created by alice" in recent_projects
        assert "Plan 5" not in recent_projects
        assert recent_projects.rstrip().endswith("... and 1 more projects")

    def test_user_dashboard_upcoming(self, now: datetime) -> None:
        """Open tasks due within 7 days should be listed as upcoming deadlines."""
        assigned = [
            _task("1", "In Progress", task_name="Soon", due_date="2024-01-23T00:00:00Z"),
            _task("2", "Not Started", task_name="Later", due_date="2024-03-01T00:00:00Z"),
        ]
        text = format_user_dashboard("ann", assigned, [], now)

        assert "- Assigned Tasks: 2" in text
        assert "Active Tasks: 1" in text
        upcoming = text.split("## Upcoming Deadlines (Next 7 Days)", 1)[1]
        assert "Soon" in upcoming
        assert "Later" not in upcoming

    def test_user_dashboard_empty(self, now: datetime) -> None:
        """A user without assigned tasks should get a short dashboard."""
        text = format_user_dashboard("ann", [], [], now)
        assert "No tasks currently assigned." in text

    def test_project_dashboard_critical(self, now: datetime) -> None:
        """High priority or overdue open tasks should be listed as critical."""
        tasks = [
            _task("1", "In Progress", task_name="Urgent", priority="High"),
            _task("2", "Blocked", task_name="Late", due_date="2024-01-01T00:00:00Z"),
            _task("3", "Complete", task_name="Done", priority="High"),
            _task("4", "Not Started", task_name="Calm", priority="Low"),
        ]
        text = format_project_dashboard(_project(), tasks, now)

        critical = text.split("## Critical Tasks (High Priority or Overdue)", 1)[1]
        critical = critical.split("## Recent Activity", 1)[0]
        assert "Urgent" in critical
        assert "Late" in critical
        assert "Done" not in critical
        assert "Calm" not in critical
