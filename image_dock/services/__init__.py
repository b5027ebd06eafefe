"""Workflow and collaborator services.

Each service is constructed once at startup (see ``image_dock.core.lifespan``)
and handed to routes through FastAPI dependencies.
"""

from .catalog import ImageCatalog
from .listing import ListingService
from .object_store import ObjectStore, ObjectStoreError, S3ObjectStore
from .uploads import ImageMetadata, UploadResponse, UploadService, build_public_url, build_storage_key

__all__ = [
    "ImageCatalog",
    "ImageMetadata",
    "ListingService",
    "ObjectStore",
    "ObjectStoreError",
    "S3ObjectStore",
    "UploadResponse",
    "UploadService",
    "build_public_url",
    "build_storage_key",
]
