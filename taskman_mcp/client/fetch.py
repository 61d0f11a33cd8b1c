"""Typed fetch and mutation helpers on top of the raw API client.

Each helper decodes the response into pydantic records and raises
DecodeError naming the entity when the payload does not fit.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from taskman_mcp.client.api import (
    HEALTH_PATH,
    TaskmanAPI,
    project_path,
    project_tasks_path,
    projects_path,
    task_notes_path,
    task_path,
    tasks_path,
)
from taskman_mcp.exceptions import DecodeError
from taskman_mcp.models import (
    NoteCreate,
    Project,
    ProjectCreate,
    Task,
    TaskCreate,
    TaskNote,
    TaskUpdate,
)

M = TypeVar("M", bound=BaseModel)


def decode_one(payload: bytes, model: type[M], entity: str) -> M:
    """Decode a JSON object into a model.

    Raises:
        DecodeError: If the payload is not valid JSON for the model.
    """
    try:
        return model.model_validate_json(payload)
    except PydanticValidationError as e:
        raise DecodeError(entity, e) from e


def decode_many(payload: bytes, model: type[M], entity: str) -> list[M]:
    """Decode a JSON array into a list of models. ``null`` decodes as []."""
    if payload.strip() in (b"", b"null"):
        return []
    try:
        return TypeAdapter(list[model]).validate_json(payload)  # type: ignore[valid-type]
    except PydanticValidationError as e:
        raise DecodeError(entity, e) from e


async def get_task(client: TaskmanAPI, task_id: str) -> Task:
    return decode_one(await client.get(task_path(task_id)), Task, "task")


async def list_tasks(client: TaskmanAPI, **filters: Any) -> list[Task]:
    return decode_many(await client.get(tasks_path(**filters)), Task, "tasks")


async def list_notes(client: TaskmanAPI, task_id: str) -> list[TaskNote]:
    return decode_many(await client.get(task_notes_path(task_id)), TaskNote, "task notes")


async def get_project(client: TaskmanAPI, project_id: str) -> Project:
    return decode_one(await client.get(project_path(project_id)), Project, "project")


async def list_projects(client: TaskmanAPI) -> list[Project]:
    return decode_many(await client.get(projects_path()), Project, "projects")


async def list_project_tasks(client: TaskmanAPI, project_id: str) -> list[Task]:
    return decode_many(
        await client.get(project_tasks_path(project_id)), Task, "project tasks"
    )


async def create_task(client: TaskmanAPI, request: TaskCreate) -> Task:
    payload = await client.post(tasks_path(), request.payload())
    return decode_one(payload, Task, "created task")


async def update_task(client: TaskmanAPI, task_id: str, request: TaskUpdate) -> Task:
    payload = await client.put(task_path(task_id), request.payload())
    return decode_one(payload, Task, "updated task")


async def add_note(client: TaskmanAPI, task_id: str, request: NoteCreate) -> TaskNote:
    payload = await client.post(task_notes_path(task_id), request.payload())
    return decode_one(payload, TaskNote, "created note")


async def create_project(client: TaskmanAPI, request: ProjectCreate) -> Project:
    payload = await client.post(projects_path(), request.payload())
    return decode_one(payload, Project, "created project")


async def health(client: TaskmanAPI) -> bytes:
    return await client.get(HEALTH_PATH)
