from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from task_manager_api.app.settings import Settings
from task_manager_api.app.storage.postgres import PostgresTaskStorage
from task_manager_api.main import create_app


@pytest.fixture
def postgres_client() -> Iterator[TestClient]:
    if os.getenv("RUN_POSTGRES_INTEGRATION_TESTS") != "1":
        pytest.skip(
            "Set RUN_POSTGRES_INTEGRATION_TESTS=1 and TASK_MANAGER_DATABASE_URL "
            "to run integration tests against PostgreSQL."
        )
    database_url = os.getenv("TASK_MANAGER_DATABASE_URL")
    if not database_url:
        pytest.skip("TASK_MANAGER_DATABASE_URL is required for integration tests.")

    app = create_app(
        storage=PostgresTaskStorage(database_url),
        settings_override=Settings(database_url=database_url, log_level="WARNING"),
    )
    with TestClient(app) as client:
        yield client
