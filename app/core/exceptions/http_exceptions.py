"""HTTP exception hierarchy and standardized error responses.

Exception Hierarchy:
    AppError (HTTPException)
    ├── ClientError (4xx errors)
    │   ├── BadRequestError (400)
    │   ├── NotFoundError (404)
    │   └── ConflictError (409)
    └── ServerError (5xx errors)
        ├── InternalServerError (500)
        ├── BadGatewayError (502)
        ├── ServiceUnavailableError (503)
        └── GatewayTimeoutError (504)

Usage:
    raise NotFoundError(
        message="Product not found",
        detail={"product_id": "a1b2"},
    )

    # Or hand over a prebuilt ErrorResponse
    raise NotFoundError(ErrorResponse(error_code="PRODUCT_NOT_FOUND", message="Product not found"))
"""

from typing import Any

from fastapi import HTTPException, status
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    success: bool = Field(default=False, description="Always False for errors")
    error_code: str = Field(description="Error code identifier")
    message: str = Field(description="Human-readable error message")
    detail: dict[str, Any] | None = Field(default=None, description="Additional error details")
    path: str | None = Field(default=None, description="Request path where error occurred")


class AppError(HTTPException):
    """Base exception for all application HTTP errors."""

    default_message = "An error occurred"
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str | ErrorResponse | None = None,
        error_code: str | None = None,
        status_code: int | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        if isinstance(message, ErrorResponse):
            text, code, extra = message.message, message.error_code, message.detail
        else:
            text = message or self.default_message
            code = error_code or self.__class__.__name__
            extra = detail

        # HTTPException.__init__ assigns self.detail, so ours is set afterwards
        super().__init__(status_code=status_code or self.default_status, detail=text)
        self.message = text
        self.error_code = code
        self.detail = extra

    def __str__(self) -> str:
        return self.message

    def to_error_response(self, path: str | None = None) -> ErrorResponse:
        """Convert exception to ErrorResponse object.

        Args:
            path: Request path where error occurred

        Returns:
            ErrorResponse object
        """
        return ErrorResponse(
            error_code=self.error_code,
            message=self.message,
            detail=self.detail,
            path=path,
        )


# ============================================================================
# Client Exceptions (4xx)
# ============================================================================


class ClientError(AppError):
    """Base exception for client errors (4xx)."""

    default_message = "Client error"
    default_status = status.HTTP_400_BAD_REQUEST


class BadRequestError(ClientError):
    """400 Bad Request - Invalid request parameters."""

    default_message = "Bad request"
    default_status = status.HTTP_400_BAD_REQUEST


class NotFoundError(ClientError):
    """404 Not Found - Resource does not exist."""

    default_message = "Not found"
    default_status = status.HTTP_404_NOT_FOUND


class ConflictError(ClientError):
    """409 Conflict - Resource already exists or state conflict."""

    default_message = "Conflict"
    default_status = status.HTTP_409_CONFLICT


# ============================================================================
# Server Exceptions (5xx)
# ============================================================================


class ServerError(AppError):
    """Base exception for server errors (5xx)."""

    default_message = "Server error"
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR


class InternalServerError(ServerError):
    """500 Internal Server Error - Unexpected server error."""

    default_message = "Internal server error"
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR


class BadGatewayError(ServerError):
    """502 Bad Gateway - An upstream service answered with an error."""

    default_message = "Bad gateway"
    default_status = status.HTTP_502_BAD_GATEWAY


class ServiceUnavailableError(ServerError):
    """503 Service Unavailable - Service temporarily unavailable."""

    default_message = "Service unavailable"
    default_status = status.HTTP_503_SERVICE_UNAVAILABLE


class GatewayTimeoutError(ServerError):
    """504 Gateway Timeout - An upstream service did not answer in time."""

    default_message = "Gateway timeout"
    default_status = status.HTTP_504_GATEWAY_TIMEOUT
