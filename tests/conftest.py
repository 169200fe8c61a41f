from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from task_manager_api.app.service import TaskService
from task_manager_api.app.settings import Settings
from task_manager_api.app.storage.memory import InMemoryTaskStorage
from task_manager_api.main import create_app


class TickingClock:
    """Test clock that moves forward one second on every read."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2025, 1, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


@pytest.fixture
def storage() -> InMemoryTaskStorage:
    return InMemoryTaskStorage(clock=TickingClock())


@pytest.fixture
def service(storage: InMemoryTaskStorage) -> TaskService:
    return TaskService(storage)


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="", api_prefix="/api", log_level="WARNING")


@pytest.fixture
def client(storage: InMemoryTaskStorage, settings: Settings) -> Iterator[TestClient]:
    app = create_app(storage=storage, settings_override=settings)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
