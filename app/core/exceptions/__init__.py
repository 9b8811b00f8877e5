"""Exception handling package for FastAPI application.

Provides custom exception hierarchy and handlers for standardized error responses.
"""

from .handlers import register_exception_handlers
from .http_exceptions import (
    AppError,
    BadGatewayError,
    BadRequestError,
    ClientError,
    ConflictError,
    ErrorResponse,
    GatewayTimeoutError,
    InternalServerError,
    NotFoundError,
    ServerError,
    ServiceUnavailableError,
)
from .storage_exceptions import (
    ImageStorageError,
    ImageUploadTimeoutError,
    RemoteStoreUnavailableError,
)

__all__ = [
    # Base exceptions
    "AppError",
    # Client exceptions (4xx)
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "NotFoundError",
    # Models
    "ErrorResponse",
    # Server exceptions (5xx)
    "BadGatewayError",
    "GatewayTimeoutError",
    "InternalServerError",
    "ServerError",
    "ServiceUnavailableError",
    # Storage
    "ImageStorageError",
    "ImageUploadTimeoutError",
    "RemoteStoreUnavailableError",
    # Handlers
    "register_exception_handlers",
]
