"""Storage backends for task records."""

from task_manager_api.app.storage.base import TaskStorage
from task_manager_api.app.storage.memory import InMemoryTaskStorage
from task_manager_api.app.storage.postgres import PostgresTaskStorage

__all__ = [
    "InMemoryTaskStorage",
    "PostgresTaskStorage",
    "TaskStorage",
]
