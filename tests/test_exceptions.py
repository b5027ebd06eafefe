"""Test cases for exception handling system."""

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient
from pydantic import BaseModel, ValidationError

from image_dock.core.exceptions import (
    BadRequestError,
    ErrorResponse,
    InternalServerError,
    ListFailedError,
    MethodNotAllowedError,
    NotFoundError,
    ServerConfigurationError,
    UploadFailedError,
    register_exception_handlers,
)


@pytest.fixture
def app() -> FastAPI:
    """Create test FastAPI application."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app, raise_server_exceptions=False)


# =============================================================================
# Test ErrorResponse Model
# =============================================================================


def test_error_response_model():
    """Test ErrorResponse model creation and validation."""
    error = ErrorResponse(
        error_code="FileNotFound",
        message="File not found",
        detail={"field": "image"},
        path="/upload",
    )

    assert error.success is False
    assert error.error_code == "FileNotFound"
    assert error.message == "File not found"
    assert error.detail == {"field": "image"}
    assert error.path == "/upload"


def test_error_response_model_defaults() -> None:
    error = ErrorResponse(error_code="TEST", message="Test")

    assert error.success is False
    assert error.detail is None
    assert error.path is None


def test_error_response_validation_error() -> None:
    """detail must be a mapping."""
    with pytest.raises(ValidationError):
        ErrorResponse(error_code="TEST", message="Test", detail="invalid_string")


# =============================================================================
# Test Client Errors
# =============================================================================


def test_bad_request_error_with_params(app: FastAPI, client: TestClient) -> None:
    @app.post("/test-bad-request")
    async def route():
        raise BadRequestError("File not found", error_code="FileNotFound", detail={"field": "image"})

    response = client.post("/test-bad-request")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["success"] is False
    assert data["error_code"] == "FileNotFound"
    assert data["message"] == "File not found"
    assert data["detail"] == {"field": "image"}
    assert data["path"] == "/test-bad-request"


def test_bad_request_error_default_code(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-bad-request")
    async def route():
        raise BadRequestError(message="Failed to parse form")

    response = client.get("/test-bad-request")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error_code"] == "BadRequestError"


def test_bad_request_with_error_response(app: FastAPI, client: TestClient) -> None:
    """Test BadRequestError with ErrorResponse object."""

    @app.get("/test-bad-request-obj")
    async def route():
        error = ErrorResponse(error_code="FileNotFound", message="File not found", detail={"field": "image"})
        raise BadRequestError(error)

    response = client.get("/test-bad-request-obj")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "FileNotFound"
    assert data["message"] == "File not found"


def test_not_found_error_default_message(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-default")
    async def route():
        raise NotFoundError()

    response = client.get("/test-default")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    data = response.json()
    assert data["message"] == "Not found"
    assert data["error_code"] == "NotFoundError"


def test_method_not_allowed_error(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-method")
    async def route():
        raise MethodNotAllowedError()

    response = client.get("/test-method")

    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
    data = response.json()
    assert data["error_code"] == "MethodNotAllowed"
    assert data["message"] == "Invalid method"


# =============================================================================
# Test Server Errors
# =============================================================================


@pytest.mark.parametrize(
    ("exc_class", "error_code", "message"),
    [
        (UploadFailedError, "UploadFailed", "Upload failed"),
        (ListFailedError, "ListFailed", "Failed to list images"),
        (ServerConfigurationError, "ConfigError", "Server configuration error"),
        (InternalServerError, "InternalServerError", "Internal server error"),
    ],
)
def test_server_error_defaults(
    app: FastAPI, client: TestClient, exc_class: type, error_code: str, message: str
) -> None:
    @app.get("/test-server-error")
    async def route():
        raise exc_class()

    response = client.get("/test-server-error")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["error_code"] == error_code
    assert data["message"] == message
    assert "detail" not in data


def test_upload_failed_error_keeps_detail(app: FastAPI, client: TestClient) -> None:
    @app.post("/test-upload")
    async def route():
        raise UploadFailedError(detail={"key": "uploads/a.png"})

    data = client.post("/test-upload").json()

    assert data["error_code"] == "UploadFailed"
    assert data["detail"] == {"key": "uploads/a.png"}


# =============================================================================
# Test Routing Errors
# =============================================================================


def test_wrong_method_uses_method_not_allowed(app: FastAPI, client: TestClient) -> None:
    @app.post("/upload")
    async def route():
        return {}

    response = client.delete("/upload")

    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
    data = response.json()
    assert data["error_code"] == "MethodNotAllowed"
    assert data["message"] == "Invalid method"
    assert data["path"] == "/upload"
    assert "POST" in response.headers["allow"]


def test_unknown_path_uses_not_found_code(client: TestClient) -> None:
    response = client.get("/nowhere")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    data = response.json()
    assert data["error_code"] == "NotFound"
    assert data["path"] == "/nowhere"


# =============================================================================
# Test Generic Exception Handler
# =============================================================================


def test_generic_exception_handler(app: FastAPI, client: TestClient) -> None:
    """Unexpected errors become a 500 without leaking internals."""

    @app.get("/test-unexpected")
    async def route():
        msg = "Unexpected error"
        raise ValueError(msg)

    response = client.get("/test-unexpected")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["error_code"] == "InternalServerError"
    assert data["message"] == "An unexpected error occurred"
    assert "path" in data


# =============================================================================
# Test Pydantic Validation Error Handler
# =============================================================================


def test_validation_error_handler(app: FastAPI, client: TestClient) -> None:
    class Payload(BaseModel):
        name: str
        size: int

    @app.post("/test-validation")
    async def route(data: Payload):
        return data

    response = client.post("/test-validation", json={"name": "a.png", "size": "big"})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    data = response.json()
    assert data["error_code"] == "ValidationError"
    assert data["message"] == "Request validation failed"
    assert "errors" in data["detail"]


# =============================================================================
# Test to_error_response Method
# =============================================================================


def test_exception_to_error_response_conversion() -> None:
    exc = NotFoundError(message="Image with id 7 not found", detail={"image_id": 7})

    error_response = exc.to_error_response(path="/api/images/records/7")

    assert isinstance(error_response, ErrorResponse)
    assert error_response.error_code == "NotFoundError"
    assert error_response.detail == {"image_id": 7}
    assert error_response.path == "/api/images/records/7"


def test_error_response_excludes_none_values(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-no-detail")
    async def route():
        raise NotFoundError(message="Not found")

    data = client.get("/test-no-detail").json()

    assert "detail" not in data


def test_structured_detail_is_kept_apart_from_http_detail() -> None:
    exc = UploadFailedError(detail={"key": "uploads/a.png"})

    assert exc.detail == "Upload failed"
    assert exc.error_detail == {"key": "uploads/a.png"}
    assert exc.to_error_response(path="/upload").detail == {"key": "uploads/a.png"}


def test_error_response_object_keeps_its_detail() -> None:
    error = ErrorResponse(error_code="FileNotFound", message="File not found", detail={"field": "image"})

    exc = BadRequestError(error)

    assert exc.status_code == status.HTTP_400_BAD_REQUEST
    assert exc.detail == "File not found"
    assert exc.to_error_response().model_dump(exclude_none=True) == {
        "success": False,
        "error_code": "FileNotFound",
        "message": "File not found",
        "detail": {"field": "image"},
    }
