"""MCP resource catalogue and routing of ``taskman://`` URIs to aggregators."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from mcp import types

from taskman_mcp.client.api import TaskmanAPI
from taskman_mcp.exceptions import InvalidResourceURIError
from taskman_mcp.formatters.common import Report
from taskman_mcp.metrics import MetricsSink
from taskman_mcp.resources.base import Clock
from taskman_mcp.resources.dashboard import DashboardResources
from taskman_mcp.resources.project import ProjectResources
from taskman_mcp.resources.status import StatusResources
from taskman_mcp.resources.task import TaskResources
from taskman_mcp.utils import uri as patterns
from taskman_mcp.utils.dates import utcnow
from taskman_mcp.utils.uri import UriPattern

logger = logging.getLogger(__name__)

MARKDOWN = "text/markdown"
JSON = "application/json"


@dataclass(frozen=True)
class ResourceEntry:
    """One advertised resource or resource template."""

    pattern: UriPattern
    name: str
    description: str
    mime_type: str = MARKDOWN

    @property
    def is_template(self) -> bool:
        return bool(self.pattern.names)


CATALOGUE = [
    ResourceEntry(
        patterns.API_STATUS, "API Status", "Current status of the taskman API server", JSON
    ),
    ResourceEntry(
        patterns.TASK,
        "Task Details",
        "Individual task with complete details, notes, and project information",
    ),
    ResourceEntry(
        patterns.TASKS_OVERVIEW,
        "Tasks Overview",
        "Overview of all tasks with status and priority breakdowns",
    ),
    ResourceEntry(
        patterns.USER_TASKS,
        "User Tasks",
        "All tasks assigned to a specific user, organized by status",
    ),
    ResourceEntry(
        patterns.PROJECT,
        "Project Details",
        "Individual project with task summary and progress metrics",
    ),
    ResourceEntry(
        patterns.PROJECTS_OVERVIEW,
        "Projects Overview",
        "Overview of all projects with creation statistics",
    ),
    ResourceEntry(
        patterns.PROJECT_TASKS,
        "Project Tasks",
        "All tasks within a specific project, organized by status",
    ),
    ResourceEntry(
        patterns.SYSTEM_DASHBOARD,
        "System Dashboard",
        "System-wide dashboard with overall statistics and insights",
    ),
    ResourceEntry(
        patterns.USER_DASHBOARD,
        "User Dashboard",
        "Personalized dashboard for a specific user with workload and deadlines",
    ),
    ResourceEntry(
        patterns.PROJECT_DASHBOARD,
        "Project Dashboard",
        "Project-specific dashboard with team workload and critical tasks",
    ),
]


def static_resources() -> list[types.Resource]:
    """Resources with fixed URIs."""
    return [
        types.Resource(
            uri=entry.pattern.uri_template,
            name=entry.name,
            description=entry.description,
            mimeType=entry.mime_type,
        )
        for entry in CATALOGUE
        if not entry.is_template
    ]


def resource_templates() -> list[types.ResourceTemplate]:
    """Resources whose URIs carry an identifier."""
    return [
        types.ResourceTemplate(
            uriTemplate=entry.pattern.uri_template,
            name=entry.name,
            description=entry.description,
            mimeType=entry.mime_type,
        )
        for entry in CATALOGUE
        if entry.is_template
    ]


def mime_type_for(uri: str) -> str:
    for entry in CATALOGUE:
        if entry.pattern.matches(uri):
            return entry.mime_type
    return MARKDOWN


ReadFn = Callable[[str], Awaitable[Report]]


class ResourceRouter:
    """Dispatches a resource URI to the aggregator method that renders it."""

    def __init__(
        self,
        client: TaskmanAPI,
        metrics: MetricsSink | None = None,
        clock: Clock = utcnow,
    ) -> None:
        tasks = TaskResources(client, metrics, clock)
        projects = ProjectResources(client, metrics, clock)
        dashboards = DashboardResources(client, metrics, clock)
        status = StatusResources(client, metrics, clock)

        self._routes: list[tuple[UriPattern, ReadFn]] = [
            (patterns.TASK, tasks.read_task),
            (patterns.TASKS_OVERVIEW, tasks.read_tasks_overview),
            (patterns.USER_TASKS, tasks.read_user_tasks),
            (patterns.PROJECT_TASKS, projects.read_project_tasks),
            (patterns.PROJECT, projects.read_project),
            (patterns.PROJECTS_OVERVIEW, projects.read_projects_overview),
            (patterns.SYSTEM_DASHBOARD, dashboards.read_system_dashboard),
            (patterns.USER_DASHBOARD, dashboards.read_user_dashboard),
            (patterns.PROJECT_DASHBOARD, dashboards.read_project_dashboard),
            (patterns.API_STATUS, status.read_api_status),
        ]

    async def read(self, uri: str) -> Report:
        """Render the resource at ``uri``.

        Raises:
            InvalidResourceURIError: If no resource has this URI shape.
            TaskmanError: If the aggregator fails.
        """
        for pattern, read in self._routes:
            if pattern.matches(uri):
                return await read(uri)
        logger.warning("Unknown resource requested: %s", uri)
        raise InvalidResourceURIError("resource", uri)
