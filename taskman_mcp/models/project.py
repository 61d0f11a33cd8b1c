"""Project records as exchanged with the taskman API."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class Project(BaseModel):
    """A project snapshot fetched from the API."""

    project_id: str
    project_name: str
    project_description: str | None = None
    created_by: str
    creation_date: str

    model_config = ConfigDict(coerce_numbers_to_str=True)


class ProjectCreate(BaseModel):
    """Body for ``POST /projects``."""

    project_name: str
    project_description: str | None = None
    created_by: str

    def payload(self) -> dict[str, Any]:
        """Convert to a JSON body, dropping unset optional fields."""
        return self.model_dump(exclude_none=True)
