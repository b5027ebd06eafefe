"""Shared fixtures: fake collaborators and a test client wired to them."""

from collections.abc import Iterator
from typing import BinaryIO

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from image_dock.core.dependencies import get_image_catalog, get_object_store, get_storage_config
from image_dock.main import create_app
from image_dock.main_config import StorageConfig
from image_dock.models.image import ImageRecord
from image_dock.services.object_store import ObjectStoreError

PUBLIC_BASE = "https://cdn.example.com"


class FakeObjectStore:
    """In-memory bucket. Keys are listed in lexicographic order, like S3."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.content_types: dict[tuple[str, str], str | None] = {}
        self.listed_prefixes: list[str] = []
        self.fail_put = False
        self.fail_list = False

    async def put_object(
        self, bucket: str, key: str, body: BinaryIO, content_type: str | None = None
    ) -> None:
        if self.fail_put:
            raise ObjectStoreError("simulated put failure")
        self.objects[(bucket, key)] = body.read()
        self.content_types[(bucket, key)] = content_type

    async def list_keys(self, bucket: str, prefix: str) -> list[str]:
        if self.fail_list:
            raise ObjectStoreError("simulated list failure")
        self.listed_prefixes.append(prefix)
        return sorted(key for b, key in self.objects if b == bucket and key.startswith(prefix))


class FakeCatalog:
    """Records inserts in a list; can be told to fail like a dead database."""

    def __init__(self) -> None:
        self.records: list[ImageRecord] = []
        self.fail_insert = False
        self.insert_error: Exception | None = None

    async def insert(self, **fields) -> ImageRecord:
        if self.fail_insert:
            raise OperationalError("INSERT INTO images", {}, Exception("connection refused"))
        if self.insert_error is not None:
            raise self.insert_error
        record = ImageRecord(id=len(self.records) + 1, **fields)
        self.records.append(record)
        return record

    async def get_by_id(self, image_id: int) -> ImageRecord | None:
        return next((r for r in self.records if r.id == image_id), None)

    async def list_all(
        self, category: str | None = None, sub_category: str | None = None
    ) -> list[ImageRecord]:
        records = [
            r
            for r in reversed(self.records)
            if (category is None or r.category == category)
            and (sub_category is None or r.sub_category == sub_category)
        ]
        return records


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(
        s3_bucket="images-bucket",
        upload_dir="uploads",
        public_url_base=PUBLIC_BASE,
        _env_file=None,
    )


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def app(storage_config: StorageConfig, object_store: FakeObjectStore, catalog: FakeCatalog) -> FastAPI:
    """Application with storage, catalog and settings replaced by fakes."""
    test_app = create_app()
    test_app.dependency_overrides[get_object_store] = lambda: object_store
    test_app.dependency_overrides[get_image_catalog] = lambda: catalog
    test_app.dependency_overrides[get_storage_config] = lambda: storage_config
    return test_app


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Client without lifespan: no database or S3 connection is opened."""
    yield TestClient(app)
    app.dependency_overrides.clear()
