"""Pydantic models shared across API, service, and storage.

Beginner terms used in this file:
- Enum: a closed set of named values; the API accepts and returns the names.
- Alias: the JSON key used on the wire (camelCase) for a snake_case field.
- Validator: a hook that checks or normalises a field while parsing a request.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


class TaskStatus(str, Enum):
    """Task lifecycle states. Any status may move to any other status."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}

DEFAULT_STATUS = TaskStatus.TODO


class Task(BaseModel):
    """Persisted task record returned by storage backends."""

    id: str
    title: str
    # None means "never set", which is different from an empty description.
    description: str | None = None
    status: TaskStatus = DEFAULT_STATUS
    created_at: datetime
    updated_at: datetime


class CreateTaskRequest(BaseModel):
    """Request body for POST /tasks."""

    title: str
    description: str | None = None
    # None lets the service pick the default status.
    status: TaskStatus | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("blank_title", "Task title cannot be blank")
        return value


class UpdateTaskRequest(BaseModel):
    """Request body for PUT /tasks/{task_id}.

    Every field is optional; the service merges non-null values into the
    stored task.
    """

    title: str | None = None
    description: str | None = None
    task_status: TaskStatus | None = Field(
        default=None,
        validation_alias=AliasChoices("taskStatus", "task_status", "status"),
    )


class UpdateTaskStatusRequest(BaseModel):
    """Request body for PATCH /tasks/{task_id}/status."""

    # Optional here on purpose: the service reports a missing status itself.
    status: TaskStatus | None = None


class TaskResponse(BaseModel):
    """Outbound task shape. Every field is always serialised."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str | None
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_task(cls, task: Task) -> TaskResponse:
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class ErrorResponse(BaseModel):
    """Body returned for every non-2xx response."""

    status: int
    error: str
    message: str
