"""Exception handlers for the FastAPI application.

Provides centralized exception handling with standardized error responses.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .http_exceptions import AppError, ErrorResponse, InternalServerError, MethodNotAllowedError

logger = logging.getLogger(__name__)

# Error codes for HTTP errors raised by the router itself
_ROUTING_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: "NotFound",
    status.HTTP_405_METHOD_NOT_ALLOWED: "MethodNotAllowed",
}


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle custom AppError and its subclasses.

    Args:
        request: FastAPI request
        exc: Application exception

    Returns:
        JSON response with standardized error format
    """
    error_response = exc.to_error_response(path=request.url.path)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(exclude_none=True),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP errors raised by routing (unknown path, wrong method).

    Args:
        request: FastAPI request
        exc: Starlette HTTP exception

    Returns:
        JSON response with standardized error format
    """
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        error_response = MethodNotAllowedError().to_error_response(path=request.url.path)
    else:
        error_response = ErrorResponse(
            error_code=_ROUTING_ERROR_CODES.get(exc.status_code, "HTTPError"),
            message=str(exc.detail),
            path=request.url.path,
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(exclude_none=True),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors (422).

    Args:
        request: FastAPI request
        exc: Validation error

    Returns:
        JSON response with validation error details
    """
    error_response = ErrorResponse(
        error_code="ValidationError",
        message="Request validation failed",
        detail={"errors": exc.errors()},
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(exclude_none=True),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions (500).

    Args:
        request: FastAPI request
        exc: Unexpected exception

    Returns:
        JSON response with generic error message
    """
    logger.error(f"Unexpected error: {exc}", exc_info=True)

    internal_exc = InternalServerError(
        message="An unexpected error occurred",
        detail={"error": str(exc)} if logger.isEnabledFor(logging.DEBUG) else None,
    )

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
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
