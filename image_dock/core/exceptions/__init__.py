"""Exception handling package for the Image Dock application.

Provides custom exception hierarchy and handlers for standardized error responses.
"""

from .handlers import register_exception_handlers
from .http_exceptions import (
    AppError,
    BadRequestError,
    ClientError,
    ErrorResponse,
    InternalServerError,
    ListFailedError,
    MethodNotAllowedError,
    NotFoundError,
    ServerConfigurationError,
    ServerError,
    UploadFailedError,
)

__all__ = [
    # Base exceptions
    "AppError",
    # Client exceptions (4xx)
    "BadRequestError",
    "ClientError",
    # Models
    "ErrorResponse",
    # Server Error (5xx)
    "InternalServerError",
    "ListFailedError",
    "MethodNotAllowedError",
    "NotFoundError",
    "ServerConfigurationError",
    "ServerError",
    "UploadFailedError",
    # Handlers
    "register_exception_handlers",
]
