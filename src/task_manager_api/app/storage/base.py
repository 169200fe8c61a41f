"""Storage interface consumed by the task lifecycle service."""

from __future__ import annotations

from typing import Protocol

from task_manager_api.app.models import Task, TaskStatus


class TaskStorage(Protocol):
    def migrate(self) -> None: ...

    def create_task(
        self,
        *,
        title: str,
        description: str | None,
        status: TaskStatus,
    ) -> Task: ...

    def get_task(self, task_id: str) -> Task | None: ...

    def list_tasks(self) -> list[Task]: ...

    def save_task(self, task: Task) -> Task:
        """Persist mutable fields; raise TaskNotFoundError if the row is gone."""
        ...

    def delete_task(self, task: Task) -> None: ...
