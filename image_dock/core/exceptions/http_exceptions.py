"""Custom HTTP exception hierarchy and standardized error responses.

Exception Hierarchy:
    AppError (HTTPException)
    ├── ClientError (4xx errors)
    │   ├── BadRequestError (400)
    │   ├── NotFoundError (404)
    │   └── MethodNotAllowedError (405)
    └── ServerError (5xx errors)
        ├── InternalServerError (500)
        ├── UploadFailedError (500)
        ├── ListFailedError (500)
        └── ServerConfigurationError (500)

Usage:
    # Option 1: Pass individual parameters
    raise BadRequestError(
        message="File not found",
        error_code="FileNotFound",
        detail={"field": "image"},
    )

    # Option 2: Pass ErrorResponse object directly
    error = ErrorResponse(
        error_code="FileNotFound",
        message="File not found",
        detail={"field": "image"},
    )
    raise BadRequestError(error)
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

    def __init__(
        self,
        message: str | ErrorResponse = "An error occurred",
        error_code: str | None = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: dict[str, Any] | None = None,
    ) -> None:
        if isinstance(message, ErrorResponse):
            error_code, detail, message = message.error_code, message.detail, message.message

        # HTTPException.detail holds the message; the structured payload is error_detail
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.error_detail = detail

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
            detail=self.error_detail,
            path=path,
        )


# ============================================================================
# Client Exceptions (4xx)
# ============================================================================


class ClientError(AppError):
    """Base exception for client errors (4xx)."""

    def __init__(
        self,
        message: str | ErrorResponse = "Client error",
        error_code: str | None = None,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status_code, detail)


class BadRequestError(ClientError):
    """400 Bad Request - Malformed form or missing file part."""

    def __init__(
        self,
        message: str | ErrorResponse = "Bad request",
        error_code: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status.HTTP_400_BAD_REQUEST, detail)


class NotFoundError(ClientError):
    """404 Not Found - Resource does not exist."""

    def __init__(
        self,
        message: str | ErrorResponse = "Not found",
        error_code: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status.HTTP_404_NOT_FOUND, detail)


class MethodNotAllowedError(ClientError):
    """405 Method Not Allowed - Route exists but not for this method."""

    def __init__(
        self,
        message: str | ErrorResponse = "Invalid method",
        error_code: str | None = "MethodNotAllowed",
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status.HTTP_405_METHOD_NOT_ALLOWED, detail)


# ============================================================================
# Server Exceptions (5xx)
# ============================================================================


class ServerError(AppError):
    """Base exception for server errors (5xx)."""

    def __init__(
        self,
        message: str | ErrorResponse = "Server error",
        error_code: str | None = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status_code, detail)


class InternalServerError(ServerError):
    """500 Internal Server Error - Unexpected server error."""

    def __init__(
        self,
        message: str | ErrorResponse = "Internal server error",
        error_code: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


class UploadFailedError(ServerError):
    """500 - The object store rejected the write."""

    def __init__(
        self,
        message: str | ErrorResponse = "Upload failed",
        error_code: str | None = "UploadFailed",
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


class ListFailedError(ServerError):
    """500 - The object store listing call failed."""

    def __init__(
        self,
        message: str | ErrorResponse = "Failed to list images",
        error_code: str | None = "ListFailed",
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


class ServerConfigurationError(ServerError):
    """500 - A setting needed to serve the request is missing."""

    def __init__(
        self,
        message: str | ErrorResponse = "Server configuration error",
        error_code: str | None = "ConfigError",
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status.HTTP_500_INTERNAL_SERVER_ERROR, detail)
