"""Tests for GET /images."""

from fastapi import status
from fastapi.testclient import TestClient

from tests.conftest import PUBLIC_BASE, FakeCatalog, FakeObjectStore

BUCKET = "images-bucket"


def _seed(object_store: FakeObjectStore, *keys: str, bucket: str = BUCKET) -> None:
    for key in keys:
        object_store.objects[(bucket, key)] = b"x"


def test_empty_prefix_lists_nothing(client: TestClient) -> None:
    response = client.get("/images")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


def test_lists_every_key_under_prefix(client: TestClient, object_store: FakeObjectStore) -> None:
    _seed(object_store, "uploads/b.png", "uploads/a.png", "other/c.png")
    _seed(object_store, "uploads/elsewhere.png", bucket="another-bucket")

    response = client.get("/images")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == [
        f"{PUBLIC_BASE}/uploads/a.png",
        f"{PUBLIC_BASE}/uploads/b.png",
    ]


def test_listing_ignores_catalog(
    client: TestClient, object_store: FakeObjectStore, catalog: FakeCatalog
) -> None:
    """Objects whose row failed to persist are still listed."""
    catalog.fail_insert = True
    upload = client.post("/upload", files={"image": ("orphan.png", b"data", "image/png")})
    assert upload.status_code == status.HTTP_200_OK

    response = client.get("/images")

    assert response.json() == [f"{PUBLIC_BASE}/uploads/orphan.png"]
    assert catalog.records == []


def test_backslash_prefix_is_normalized(
    client: TestClient, storage_config, object_store: FakeObjectStore
) -> None:
    storage_config.upload_dir = "uploads\\2024"

    client.get("/images")

    assert object_store.listed_prefixes == ["uploads/2024"]


def test_list_failure_is_server_error(client: TestClient, object_store: FakeObjectStore) -> None:
    object_store.fail_list = True

    response = client.get("/images")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["error_code"] == "ListFailed"
    assert data["message"] == "Failed to list images"


def test_missing_public_url_base_is_config_error(
    client: TestClient, storage_config, object_store: FakeObjectStore
) -> None:
    _seed(object_store, "uploads/a.png")
    storage_config.public_url_base = ""

    response = client.get("/images")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["error_code"] == "ConfigError"
    assert "uploads/a.png" not in response.text
