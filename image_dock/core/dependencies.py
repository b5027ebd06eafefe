"""
FastAPI dependency injection functions for storage, catalog and workflows.

The long-lived handles (S3 client wrapper, image catalog) are built once in
the application lifespan and stored on ``app.state``. Routes never reach for
them directly; they depend on the functions below.

Testing with Dependency Override:
    class FakeObjectStore:
        async def put_object(self, bucket, key, body, content_type=None): ...
        async def list_keys(self, bucket, prefix): return []

    app.dependency_overrides[get_object_store] = lambda: FakeObjectStore()
    app.dependency_overrides[get_storage_config] = lambda: StorageConfig(...)
"""

from fastapi import Depends, Request

from image_dock.main_config import StorageConfig, get_storage_config
from image_dock.services.catalog import ImageCatalog
from image_dock.services.listing import ListingService
from image_dock.services.object_store import ObjectStore
from image_dock.services.uploads import UploadService

__all__ = [
    "get_image_catalog",
    "get_listing_service",
    "get_object_store",
    "get_storage_config",
    "get_upload_service",
]


def get_object_store(request: Request) -> ObjectStore:
    """Object store handle created at startup."""
    return request.app.state.object_store


def get_image_catalog(request: Request) -> ImageCatalog:
    """Image catalog created at startup."""
    return request.app.state.image_catalog


def get_upload_service(
    object_store: ObjectStore = Depends(get_object_store),
    catalog: ImageCatalog = Depends(get_image_catalog),
    config: StorageConfig = Depends(get_storage_config),
) -> UploadService:
    return UploadService(object_store, catalog, config)


def get_listing_service(
    object_store: ObjectStore = Depends(get_object_store),
    config: StorageConfig = Depends(get_storage_config),
) -> ListingService:
    return ListingService(object_store, config)
