"""Task and note records as exchanged with the taskman API."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    """Known task status labels.

    Records keep status as a plain string; upstream may send labels outside
    this set and they are rendered as-is.
    """

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    BLOCKED = "Blocked"
    REVIEW = "Review"
    COMPLETE = "Complete"


class TaskPriority(str, Enum):
    """Known task priority labels."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


VALID_STATUSES = [s.value for s in TaskStatus]
VALID_PRIORITIES = [p.value for p in TaskPriority]

# Display order for sections grouped by status
STATUS_ORDER = [
    TaskStatus.IN_PROGRESS.value,
    TaskStatus.REVIEW.value,
    TaskStatus.BLOCKED.value,
    TaskStatus.NOT_STARTED.value,
    TaskStatus.COMPLETE.value,
]

ACTIVE_STATUSES = (
    TaskStatus.IN_PROGRESS.value,
    TaskStatus.REVIEW.value,
    TaskStatus.BLOCKED.value,
)


class Task(BaseModel):
    """A task snapshot fetched from the API.

    Timestamps stay as the ISO-8601 strings upstream sent; parsing happens
    where they are compared, so a malformed value never breaks decoding.
    """

    task_id: str
    task_name: str
    task_description: str | None = None
    status: str
    priority: str | None = None
    assigned_to: str | None = None
    project_id: str | None = None
    due_date: str | None = None
    start_date: str | None = None
    completion_date: str | None = None
    tags: list[str] = Field(default_factory=list)
    archived: bool = False
    created_by: str
    creation_date: str
    last_updated_by: str | None = None
    last_update_date: str | None = None

    model_config = ConfigDict(coerce_numbers_to_str=True)

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_complete(self) -> bool:
        return self.status == TaskStatus.COMPLETE.value


class TaskNote(BaseModel):
    """A free-text note attached to a task."""

    note_id: str
    task_id: str
    note: str
    created_by: str = ""
    creation_date: str = ""
    last_updated_by: str | None = None
    last_update_date: str | None = None

    model_config = ConfigDict(coerce_numbers_to_str=True)


class TaskCreate(BaseModel):
    """Body for ``POST /tasks``."""

    task_name: str
    task_description: str | None = None
    status: str = TaskStatus.NOT_STARTED.value
    priority: str | None = None
    assigned_to: str | None = None
    project_id: str | None = None
    due_date: str | None = None
    created_by: str

    def payload(self) -> dict[str, Any]:
        """Convert to a JSON body, dropping unset optional fields."""
        return self.model_dump(exclude_none=True)


class TaskUpdate(BaseModel):
    """Body for ``PUT /tasks/{id}``. Only changed fields are sent."""

    status: str | None = None
    priority: str | None = None
    assigned_to: str | None = None
    start_date: str | None = None
    completion_date: str | None = None
    last_updated_by: str | None = None

    def payload(self) -> dict[str, Any]:
        """Convert to a JSON body, dropping unset fields."""
        return self.model_dump(exclude_none=True)


class NoteCreate(BaseModel):
    """Body for ``POST /tasks/{id}/notes``."""

    note: str
    created_by: str

    def payload(self) -> dict[str, Any]:
        return self.model_dump()
