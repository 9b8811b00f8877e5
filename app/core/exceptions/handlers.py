"""Exception handlers for FastAPI application.

Provides centralized exception handling with standardized error responses.
"""

from typing import Any

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .http_exceptions import AppError, ErrorResponse, InternalServerError, ServerError

logger = structlog.get_logger(__name__)


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle custom AppError and its subclasses.

    Server-side failures (5xx) are logged, client errors are not.
    """
    if isinstance(exc, ServerError):
        logger.warning(
            "request_failed",
            path=request.url.path,
            status_code=exc.status_code,
            error_code=exc.error_code,
            error=exc.message,
        )

    error_response = exc.to_error_response(path=request.url.path)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(exclude_none=True),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors (422)."""
    error_response = ErrorResponse(
        error_code="ValidationError",
        message="Request validation failed",
        detail={"errors": jsonable_errors(exc)},
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(exclude_none=True),
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Strip non-serialisable context (e.g. exception instances) from errors."""
    errors = []
    for error in exc.errors():
        cleaned = {key: value for key, value in error.items() if key not in {"ctx", "input"}}
        errors.append(cleaned)
    return errors


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions (500)."""
    logger.error("unhandled_exception", path=request.url.path, exc_info=exc)

    internal_exc = InternalServerError(message="An unexpected error occurred")
    error_response = internal_exc.to_error_response(path=request.url.path)

    return JSONResponse(
        status_code=internal_exc.status_code,
        content=error_response.model_dump(exclude_none=True),
    )


def register_exception_handlers(app: Any) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
