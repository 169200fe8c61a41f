"""Task lifecycle rules.

Beginner terms used in this file:
- Intent: a validated request model (create, update, or status change).
- Merge update: only fields the client actually sent (non-null) are applied.
- NotFound vs InvalidInput: a missing task is a 404, a bad request body a 400.

The service never builds HTTP responses. It returns `TaskResponse` models
and raises the typed errors from `errors.py`; the app's exception handlers
turn those into JSON bodies.
"""

from __future__ import annotations

import logging

from .errors import InvalidTaskInputError, TaskNotFoundError
from .models import (
    DEFAULT_STATUS,
    CreateTaskRequest,
    Task,
    TaskResponse,
    UpdateTaskRequest,
    UpdateTaskStatusRequest,
)
from .storage.base import TaskStorage

logger = logging.getLogger(__name__)


class TaskService:
    """Create, read, update, re-status, and delete tasks through a TaskStorage."""

    def __init__(self, storage: TaskStorage) -> None:
        self.storage = storage

    def create_task(self, request: CreateTaskRequest) -> TaskResponse:
        # Request models already reject blank titles; this guards direct callers.
        if not request.title or not request.title.strip():
            raise InvalidTaskInputError("Task title cannot be blank")

        status = request.status if request.status is not None else DEFAULT_STATUS
        task = self.storage.create_task(
            title=request.title,
            description=request.description,
            status=status,
        )
        logger.info(
            "task event=created task_id=%s status=%s title=%r",
            task.id,
            task.status.value,
            task.title,
        )
        return TaskResponse.from_task(task)

    def list_tasks(self) -> list[TaskResponse]:
        return [TaskResponse.from_task(task) for task in self.storage.list_tasks()]

    def get_task(self, task_id: str) -> TaskResponse:
        return TaskResponse.from_task(self._require_task(task_id))

    def update_task(self, task_id: str, request: UpdateTaskRequest) -> TaskResponse:
        task = self._require_task(task_id)

        # Blank titles are ignored rather than rejected.
        changes: dict[str, object] = {}
        if request.title is not None and request.title.strip():
            changes["title"] = request.title.strip()
        # An empty description is a real edit; only null leaves it alone.
        if request.description is not None:
            changes["description"] = request.description.strip()
        if request.task_status is not None:
            changes["status"] = request.task_status

        # Saved even when nothing changed so updated_at still moves.
        updated = self.storage.save_task(task.model_copy(update=changes))
        logger.info(
            "task event=updated task_id=%s fields=%s",
            updated.id,
            ",".join(sorted(changes)) or "-",
        )
        return TaskResponse.from_task(updated)

    def update_task_status(
        self,
        task_id: str,
        request: UpdateTaskStatusRequest,
    ) -> TaskResponse:
        # Checked before the lookup: a bad body against an unknown id is still a 400.
        if request.status is None:
            raise InvalidTaskInputError("Task status cannot be null")

        task = self._require_task(task_id)
        previous = task.status
        updated = self.storage.save_task(task.model_copy(update={"status": request.status}))
        logger.info(
            "task event=status_changed task_id=%s from=%s to=%s",
            updated.id,
            previous.value,
            updated.status.value,
        )
        return TaskResponse.from_task(updated)

    def delete_task(self, task_id: str) -> None:
        task = self._require_task(task_id)
        self.storage.delete_task(task)
        logger.info("task event=deleted task_id=%s title=%r", task.id, task.title)

    def _require_task(self, task_id: str) -> Task:
        task = self.storage.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task
