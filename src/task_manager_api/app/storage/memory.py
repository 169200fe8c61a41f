"""In-memory storage backend for tests only."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import uuid4

from task_manager_api.app.errors import TaskNotFoundError
from task_manager_api.app.models import Task, TaskStatus


def _utc_now() -> datetime:
    return datetime.now(UTC)


class InMemoryTaskStorage:
    """Simple in-memory implementation for unit tests."""

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._tasks: dict[str, Task] = {}
        self._clock = clock

    def migrate(self) -> None:
        return None

    def create_task(
        self,
        *,
        title: str,
        description: str | None,
        status: TaskStatus,
    ) -> Task:
        now = self._clock()
        record = Task(
            id=str(uuid4()),
            title=title,
            description=description,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self._tasks[record.id] = record
        return record.model_copy(deep=True)

    def get_task(self, task_id: str) -> Task | None:
        task = self._tasks.get(task_id)
        return task.model_copy(deep=True) if task else None

    def list_tasks(self) -> list[Task]:
        return [task.model_copy(deep=True) for task in self._tasks.values()]

    def save_task(self, task: Task) -> Task:
        current = self._tasks.get(task.id)
        if current is None:
            raise TaskNotFoundError(task.id)
        updated = task.model_copy(
            update={"created_at": current.created_at, "updated_at": self._clock()},
            deep=True,
        )
        self._tasks[task.id] = updated
        return updated.model_copy(deep=True)

    def delete_task(self, task: Task) -> None:
        self._tasks.pop(task.id, None)

    def __len__(self) -> int:
        return len(self._tasks)
