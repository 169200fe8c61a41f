"""Domain errors and the HTTP exception handlers that translate them.

The service layer only raises these errors; shaping the JSON error body
happens here, once, for every route.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .models import ErrorResponse

logger = logging.getLogger(__name__)


class TaskManagerError(Exception):
    """Base class for errors raised by the task lifecycle service."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    error = "Internal Server Error"


class TaskNotFoundError(TaskManagerError):
    """Raised when no task exists for the requested id."""

    status_code = HTTPStatus.NOT_FOUND
    error = "Task Not Found"

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task not found with ID: {task_id}")


class InvalidTaskInputError(TaskManagerError):
    """Raised when a request is missing or carries a malformed field."""

    status_code = HTTPStatus.BAD_REQUEST
    error = "Bad Request"


def error_response(status_code: int, *, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(status=status_code, error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def format_validation_errors(errors: list[dict[str, Any]]) -> str:
    """Collapse pydantic error entries into `{field: message, ...}`."""
    fields: dict[str, str] = {}
    for item in errors:
        loc = [str(part) for part in item.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        fields.setdefault(field, str(item.get("msg", "invalid value")))
    inner = ", ".join(f"{field}: {message}" for field, message in fields.items())
    return "{" + inner + "}"


async def task_manager_error_handler(request: Request, exc: TaskManagerError) -> JSONResponse:
    logger.warning(
        "request_failed method=%s path=%s status=%s error=%s",
        request.method,
        request.url.path,
        int(exc.status_code),
        exc,
    )
    return error_response(int(exc.status_code), error=exc.error, message=str(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = format_validation_errors(list(exc.errors()))
    logger.warning(
        "request_invalid method=%s path=%s errors=%s",
        request.method,
        request.url.path,
        details,
    )
    return error_response(
        int(HTTPStatus.BAD_REQUEST),
        error=f"Bad Request: {details}",
        message="Validation failed",
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    try:
        phrase = HTTPStatus(exc.status_code).phrase
    except ValueError:
        phrase = "Error"
    response = error_response(exc.status_code, error=phrase, message=str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "request_crashed method=%s path=%s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return error_response(
        int(HTTPStatus.INTERNAL_SERVER_ERROR),
        error="Internal Server Error",
        message="An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskManagerError, task_manager_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
