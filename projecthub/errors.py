"""Error taxonomy and the handlers that turn it into the JSON envelope."""

from __future__ import annotations

import traceback
from typing import TYPE_CHECKING, Any

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from projecthub.logging import get_logger

if TYPE_CHECKING:
    from fastapi import FastAPI

    from projecthub.validators.rules import ValidationIssue

logger = get_logger(__name__)


class AppError(HTTPException):
    """Base class for errors that map onto a specific HTTP status."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(status_code=self.status_code, detail=self.message, headers=headers)


class ValidationFailed(AppError):
    status_code = 422
    default_message = "Validation error"

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue]) -> ValidationFailed:
        return cls(errors=[issue.as_dict() for issue in issues])


class BadRequestError(AppError):
    status_code = 400
    default_message = "Bad request"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class RateLimitError(AppError):
    status_code = 429
    default_message = "Too many requests, please try again later"


class ServerConfigurationError(AppError):
    status_code = 500
    default_message = "Server configuration error"


def error_body(message: str, errors: list[dict[str, str]] | None = None, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    body.update(extra)
    return body


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def pydantic_issues(errors: list[dict]) -> list[dict[str, str]]:
    return [{"field": _field_name(tuple(err.get("loc", ()))), "message": err.get("msg", "Invalid value")} for err in errors]


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc, AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.errors),
            headers=exc.headers,
        )
    # Unknown routes and unhandled verbs on known routes share the generic 404.
    if exc.status_code in (404, 405) and not isinstance(exc, HTTPException):
        return JSONResponse(status_code=404, content=error_body("Route not found"))
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=error_body("Validation error", pydantic_issues(exc.errors())),
    )


async def _pydantic_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=error_body("Validation error", pydantic_issues(exc.errors())),
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    settings = getattr(request.app.state, "settings", None)
    extra: dict[str, Any] = {}
    if settings is None or not settings.is_production:
        extra["error"] = str(exc)
        extra["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return JSONResponse(status_code=500, content=error_body("Internal server error", **extra))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(ValidationError, _pydantic_validation_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
