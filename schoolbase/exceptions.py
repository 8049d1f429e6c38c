"""Custom exception classes and global exception handlers."""

import logging
import traceback

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class SchoolBaseException(Exception):
    """Base exception for all SchoolBase-specific errors."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(SchoolBaseException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found", 404)


class ForbiddenException(SchoolBaseException):
    """Access forbidden exception."""

    def __init__(self, message: str = "You don't have permission to perform this action"):
        super().__init__(message, 403)


class UnauthorizedException(SchoolBaseException):
    """Authentication required exception."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, 401)


class ConflictException(SchoolBaseException):
    """Resource conflict exception."""

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message, 409)


class ValidationException(SchoolBaseException):
    """Validation error exception with field-level errors."""

    def __init__(self, errors: list[dict] | str, message: str | None = None):
        if isinstance(errors, str):
            message = message or errors
            errors = [{"field": "general", "message": errors}]
        super().__init__(message or "Validation failed", 400)
        self.errors = errors


class SchoolContextError(SchoolBaseException):
    """School context not set error."""

    def __init__(self, message: str = "School context is required"):
        super().__init__(message, 400)


class UserContextError(SchoolBaseException):
    """User context not set error."""

    def __init__(self, message: str = "User context is required"):
        super().__init__(message, 401)


def _error_body(message: str, errors: list[dict] | None = None) -> dict:
    content = {"status": "error", "error": message}
    if errors is not None:
        content["errors"] = errors
    return content


def _format_validation_errors(exc: RequestValidationError) -> list[dict]:
    """Flatten pydantic errors into field/message pairs."""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(loc) or "general",
            "message": error.get("msg", "Invalid value"),
        })
    return errors


async def schoolbase_exception_handler(request: Request, exc: SchoolBaseException):
    """Handle SchoolBase custom exceptions."""
    logger.warning(
        f"{type(exc).__name__} on {request.method} {request.url.path}: "
        f"{exc.message} (status={exc.status_code})"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, getattr(exc, "errors", None)),
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Turn FastAPI request validation errors into 400 responses."""
    errors = _format_validation_errors(exc)
    logger.warning(f"Invalid request on {request.method} {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content=_error_body("Invalid data", errors))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Keep framework HTTP errors (unknown routes, bad methods) in the same shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}")
    logger.error(f"Exception: {type(exc).__name__}: {exc}")
    tb_lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("".join(tb_lines))

    return JSONResponse(
        status_code=500,
        content=_error_body("An unexpected error occurred"),
    )


def create_exception_handlers() -> dict:
    """Map exception classes to their handlers."""
    return {
        SchoolBaseException: schoolbase_exception_handler,
        RequestValidationError: request_validation_exception_handler,
        StarletteHTTPException: http_exception_handler,
        Exception: generic_exception_handler,
    }
