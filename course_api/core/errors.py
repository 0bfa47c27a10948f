"""Error taxonomy for the API and the handlers that turn it into responses.

Route handlers and dependencies raise the exceptions below. The handlers
registered in ``course_api.main`` map each one to its status code and a JSON
body carrying either a ``message`` or an ``errors`` list.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from course_api.core import config

logger = logging.getLogger(__name__)


class CourseAPIError(Exception):
    """Base exception for errors that are reported back to the client."""

    status_code = 500
    default_message = "An unexpected error occurred."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class ValidationFailed(CourseAPIError):
    """Raised when the request body is missing fields or carries invalid values."""

    status_code = 400
    default_message = "Validation failed."

    def __init__(self, errors: list[str]):
        super().__init__(self.default_message)
        self.errors = list(errors)

    def to_dict(self) -> dict[str, Any]:
        return {"errors": self.errors}


class Unauthenticated(CourseAPIError):
    """Raised when credentials are missing or do not match a user.

    Every cause produces the same body so callers cannot tell an unknown
    email from a wrong password.
    """

    status_code = 401
    default_message = "Access Denied"

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": f'Basic realm="{config.AUTH_REALM}"'}


class Forbidden(CourseAPIError):
    status_code = 403
    default_message = "You are not allowed to perform this action."


class NotFound(CourseAPIError):
    status_code = 404
    default_message = "The requested resource does not exist."


class Conflict(CourseAPIError):
    status_code = 409
    default_message = "The resource already exists."


async def course_api_error_handler(request: Request, exc: CourseAPIError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


def _field_name(location: tuple) -> str:
    parts = [str(part) for part in location if part != "body"]
    return ".".join(parts) if parts else "body"


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages: list[str] = []
    for error in exc.errors():
        message = f'Please provide a valid "{_field_name(tuple(error.get("loc", ())))}"'
        if message not in messages:
            messages.append(message)

    return JSONResponse(status_code=400, content={"errors": messages})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if exc.status_code != 404 else "Route Not Found"
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error while handling %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=503,
        content={"message": "Database unavailable. Verify DATABASE_URL and database credentials."},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error while handling %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"message": CourseAPIError.default_message},
    )
