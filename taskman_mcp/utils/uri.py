"""Matching of ``taskman://`` resource URIs against path templates."""

import re

from taskman_mcp.exceptions import InvalidResourceURIError, MissingIdentifierError

SCHEME = "taskman"

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


class UriPattern:
    """A resource URI template such as ``task/{task_id}``.

    Placeholders match exactly one path segment, which may be empty so that
    a missing identifier gets its own error instead of a format error.
    """

    def __init__(self, template: str, kind: str, id_labels: dict[str, str] | None = None) -> None:
        """Initialize the pattern.

        Args:
            template: Path after the scheme, with ``{name}`` placeholders.
            kind: Resource kind used in format errors, e.g. "user tasks".
            id_labels: Label per placeholder for "<label> ID is required"
                errors. Defaults to the placeholder name without ``_id``.
        """
        self.template = template
        self.kind = kind
        self.uri_template = f"{SCHEME}://{template}"
        self.names = _PLACEHOLDER.findall(template)
        self._id_labels = id_labels or {}

        regex = ""
        pos = 0
        for m in _PLACEHOLDER.finditer(template):
            regex += re.escape(template[pos:m.start()]) + f"(?P<{m.group(1)}>[^/]*)"
            pos = m.end()
        regex += re.escape(template[pos:])
        self._regex = re.compile(f"^{re.escape(SCHEME)}://{regex}$")

    def __repr__(self) -> str:
        return f"UriPattern({self.uri_template!r})"

    def matches(self, uri: str) -> bool:
        """Whether the URI has this pattern's shape (identifiers may be empty)."""
        return self._regex.match(uri) is not None

    def parse(self, uri: str) -> dict[str, str]:
        """Extract the named identifiers from a URI.

        Raises:
            InvalidResourceURIError: If the URI does not have this shape.
            MissingIdentifierError: If an identifier segment is empty.
        """
        m = self._regex.match(uri)
        if m is None:
            raise InvalidResourceURIError(self.kind, uri)
        params = m.groupdict()
        for name in self.names:
            if not params[name]:
                label = self._id_labels.get(name, name.removesuffix("_id"))
                raise MissingIdentifierError(label)
        return params

    def build(self, **params: str) -> str:
        """Render a concrete URI from identifiers."""
        return self.uri_template.format(**params)


TASK = UriPattern("task/{task_id}", "task resource")
TASKS_OVERVIEW = UriPattern("tasks/overview", "tasks overview")
USER_TASKS = UriPattern("tasks/user/{user_id}", "user tasks resource")
PROJECT = UriPattern("project/{project_id}", "project resource")
PROJECTS_OVERVIEW = UriPattern("projects/overview", "projects overview")
PROJECT_TASKS = UriPattern("project/{project_id}/tasks", "project tasks resource")
SYSTEM_DASHBOARD = UriPattern("dashboard/system", "system dashboard")
USER_DASHBOARD = UriPattern("dashboard/user/{user_id}", "user dashboard")
PROJECT_DASHBOARD = UriPattern("dashboard/project/{project_id}", "project dashboard")
API_STATUS = UriPattern("api/status", "API status")
