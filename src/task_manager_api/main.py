"""FastAPI application wiring for the task manager service.

Beginner terms used in this file:
- FastAPI app: the main web application object.
- Route/path operation: a function exposed over HTTP (for example, GET /health).
- response_model: Pydantic model used to validate/shape API responses.
- app.state: a place to store shared runtime objects (storage, service).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .app.errors import register_exception_handlers
from .app.logging_setup import configure_logging
from .app.models import (
    CreateTaskRequest,
    ErrorResponse,
    TaskResponse,
    UpdateTaskRequest,
    UpdateTaskStatusRequest,
)
from .app.service import TaskService
from .app.settings import Settings, get_settings
from .app.storage.base import TaskStorage
from .app.storage.postgres import PostgresTaskStorage

logger = logging.getLogger(__name__)

NOT_FOUND = {404: {"model": ErrorResponse}}
BAD_REQUEST = {400: {"model": ErrorResponse}}


def _ensure_runtime_state(
    app: FastAPI,
    *,
    settings: Settings,
    storage_override: TaskStorage | None,
) -> None:
    if not hasattr(app.state, "storage"):
        database_url = settings.resolved_database_url()
        if storage_override is None and not database_url:
            raise RuntimeError(
                "Missing database URL. Set TASK_MANAGER_DATABASE_URL "
                "or DATABASE_URL before starting the app."
            )
        if storage_override is not None:
            app.state.storage = storage_override
        else:
            app.state.storage = PostgresTaskStorage(database_url)
        app.state.storage.migrate()
        logger.info(
            "app event=storage_ready backend=%s env=%s",
            type(app.state.storage).__name__,
            settings.app_env,
        )

    if not hasattr(app.state, "service"):
        app.state.service = TaskService(app.state.storage)

    if not hasattr(app.state, "settings"):
        app.state.settings = settings


def create_app(
    *,
    storage: TaskStorage | None = None,
    settings_override: Settings | None = None,
) -> FastAPI:
    """Application factory.

    When `storage` is given (tests), runtime state is built immediately.
    Otherwise the PostgreSQL backend is created and migrated on startup.
    """
    settings = settings_override if settings_override is not None else get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _ensure_runtime_state(app, settings=settings, storage_override=storage)
        yield

    app_lifespan = lifespan if storage is None else None
    app = FastAPI(title=settings.app_name, version=__version__, lifespan=app_lifespan)

    # Keep test paths reliable when lifespan is not executed by the client.
    if storage is not None:
        _ensure_runtime_state(app, settings=settings, storage_override=storage)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    def get_task_service(request: Request) -> TaskService:
        if not hasattr(request.app.state, "service"):
            _ensure_runtime_state(request.app, settings=settings, storage_override=storage)
        return request.app.state.service

    # Multiple health endpoints map to the same function for compatibility with
    # different load balancers and orchestrators.
    @app.get("/health")
    @app.get("/healthz")
    @app.get("/live")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.app_name}

    router = APIRouter(prefix=f"{settings.api_prefix.rstrip('/')}/tasks", tags=["tasks"])

    @router.post(
        "",
        response_model=TaskResponse,
        status_code=status.HTTP_201_CREATED,
        responses=BAD_REQUEST,
    )
    def create_task(
        payload: CreateTaskRequest,
        service: TaskService = Depends(get_task_service),
    ) -> TaskResponse:
        return service.create_task(payload)

    @router.get("", response_model=list[TaskResponse])
    def list_tasks(service: TaskService = Depends(get_task_service)) -> list[TaskResponse]:
        return service.list_tasks()

    @router.get("/{task_id}", response_model=TaskResponse, responses=NOT_FOUND)
    def get_task(
        task_id: str,
        service: TaskService = Depends(get_task_service),
    ) -> TaskResponse:
        return service.get_task(task_id)

    @router.put(
        "/{task_id}",
        response_model=TaskResponse,
        responses={**BAD_REQUEST, **NOT_FOUND},
    )
    def update_task(
        task_id: str,
        payload: UpdateTaskRequest,
        service: TaskService = Depends(get_task_service),
    ) -> TaskResponse:
        return service.update_task(task_id, payload)

    @router.patch(
        "/{task_id}/status",
        response_model=TaskResponse,
        responses={**BAD_REQUEST, **NOT_FOUND},
    )
    def update_task_status(
        task_id: str,
        payload: UpdateTaskStatusRequest,
        service: TaskService = Depends(get_task_service),
    ) -> TaskResponse:
        return service.update_task_status(task_id, payload)

    @router.delete(
        "/{task_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses=NOT_FOUND,
    )
    def delete_task(
        task_id: str,
        service: TaskService = Depends(get_task_service),
    ) -> Response:
        service.delete_task(task_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    app.include_router(router)
    return app


# Module-level app for `uvicorn task_manager_api.main:app`.
app = create_app()
