"""PostgreSQL storage backend for task records.

Beginner terms:
- Migration: creating/updating database tables before normal reads/writes.
- CRUD: create, read, update, delete operations.
- Row factory: returns query rows as dict-like objects instead of tuples.
"""

from __future__ import annotations

import threading
import uuid
from datetime import UTC, datetime
from typing import Any

from task_manager_api.app.errors import TaskNotFoundError
from task_manager_api.app.models import Task, TaskStatus


class PostgresTaskStorage:
    """Thread-safe PostgreSQL-backed storage for Task records."""

    def __init__(self, database_url: str) -> None:
        if not database_url:
            raise ValueError("database_url is required")
        self.database_url = database_url
        # Lock guards DB operations done through this storage instance.
        self._lock = threading.Lock()
        self._psycopg, self._dict_row = self._load_psycopg()

    def migrate(self) -> None:
        """Create required table and indexes if they do not already exist."""
        with self._lock, self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tasks (
                    task_id UUID PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT,
                    status TEXT NOT NULL,
                    created_at TIMESTAMPTZ NOT NULL,
                    updated_at TIMESTAMPTZ NOT NULL
                )
                """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_tasks_status
                ON tasks(status)
                """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_tasks_updated_at
                ON tasks(updated_at DESC)
                """)
            conn.commit()

    def create_task(
        self,
        *,
        title: str,
        description: str | None,
        status: TaskStatus,
    ) -> Task:
        """Insert a new task row and return the stored record."""
        task_id = uuid.uuid4()
        now = datetime.now(tz=UTC)
        with self._lock, self._connect() as conn:
            conn.execute(
                """
                INSERT INTO tasks (
                    task_id,
                    title,
                    description,
                    status,
                    created_at,
                    updated_at
                ) VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (task_id, title, description, status.value, now, now),
            )
            conn.commit()
        created = self.get_task(str(task_id))
        if created is None:
            raise RuntimeError("Failed to load created task")
        return created

    def get_task(self, task_id: str) -> Task | None:
        """Read one task by id. Ids that are not valid UUIDs simply miss."""
        key = self._parse_task_id(task_id)
        if key is None:
            return None
        with self._lock, self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM tasks WHERE task_id = %s",
                (key,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    def list_tasks(self) -> list[Task]:
        with self._lock, self._connect() as conn:
            rows = conn.execute("SELECT * FROM tasks").fetchall()
        return [self._row_to_task(row) for row in rows]

    def save_task(self, task: Task) -> Task:
        """Write every mutable field and refresh updated_at."""
        updated_at = datetime.now(tz=UTC)
        with self._lock, self._connect() as conn:
            conn.execute(
                """
                UPDATE tasks
                SET title = %s,
                    description = %s,
                    status = %s,
                    updated_at = %s
                WHERE task_id = %s
                """,
                (
                    task.title,
                    task.description,
                    task.status.value,
                    updated_at,
                    uuid.UUID(task.id),
                ),
            )
            conn.commit()
        refreshed = self.get_task(task.id)
        if refreshed is None:
            raise TaskNotFoundError(task.id)
        return refreshed

    def delete_task(self, task: Task) -> None:
        with self._lock, self._connect() as conn:
            conn.execute(
                "DELETE FROM tasks WHERE task_id = %s",
                (uuid.UUID(task.id),),
            )
            conn.commit()

    def _connect(self) -> Any:
        """Open a psycopg connection that yields dict-like rows."""
        return self._psycopg.connect(self.database_url, row_factory=self._dict_row)

    @staticmethod
    def _load_psycopg() -> tuple[Any, Any]:
        """Import psycopg and helpers with a friendly install hint on failure."""
        try:
            import psycopg
            from psycopg.rows import dict_row
        except ImportError as exc:  # pragma: no cover - exercised only without dependency
            raise RuntimeError(
                "PostgreSQL backend requires psycopg. Install with: "
                'python -m pip install "psycopg[binary]>=3.2,<4.0"'
            ) from exc
        return psycopg, dict_row

    @staticmethod
    def _parse_task_id(raw: str) -> uuid.UUID | None:
        """Parse a path id; anything that is not a UUID cannot match a row."""
        try:
            return uuid.UUID(raw)
        except ValueError:
            return None

    @staticmethod
    def _parse_datetime(raw: Any) -> datetime:
        """Parse datetime value from database driver output."""
        if isinstance(raw, datetime):
            return raw
        if isinstance(raw, str):
            return datetime.fromisoformat(raw)
        raise TypeError(f"Unsupported datetime value: {type(raw)!r}")

    @classmethod
    def _row_to_task(cls, row: Any) -> Task:
        """Map one DB row to the canonical Task model."""
        return Task(
            id=str(row["task_id"]),
            title=row["title"],
            description=row["description"],
            status=TaskStatus(row["status"]),
            created_at=cls._parse_datetime(row["created_at"]),
            updated_at=cls._parse_datetime(row["updated_at"]),
        )
