"""
Upload-and-catalog workflow.

Flow for one upload:
    1. Build the storage key from the configured prefix and the filename
    2. Write the bytes to the object store (failure stops here, no row)
    3. Require a public URL base (failure leaves the object orphaned)
    4. Compose the public URL
    5. Finalize: record catalog metadata, best-effort
    6. Return ``{"message": "Upload successful", "url": ...}``

The object and its metadata row are two independent writes with no shared
transaction. ``UploadService.finalize_upload`` is the only place that touches
the catalog during an upload.
"""

from typing import BinaryIO

import structlog
from pydantic import BaseModel, Field

from image_dock.core.exceptions import ServerConfigurationError, UploadFailedError
from image_dock.main_config import StorageConfig
from image_dock.models.image import ImageRecord

from .catalog import ImageCatalog
from .object_store import ObjectStore, ObjectStoreError

__all__ = [
    "UPLOAD_SUCCESS_MESSAGE",
    "ImageMetadata",
    "UploadResponse",
    "UploadService",
    "build_public_url",
    "build_storage_key",
]

UPLOAD_SUCCESS_MESSAGE = "Upload successful"

logger = structlog.get_logger(__name__)


class ImageMetadata(BaseModel):
    """Classification fields sent alongside the file."""

    category: str = Field(default="", description="Image category")
    sub_category: str = Field(default="", description="Image sub-category")
    name: str = Field(default="", description="Display name")
    # Accepted for client compatibility; never persisted
    product_name: str | None = Field(default=None, description="Ignored legacy field")


class UploadResponse(BaseModel):
    """Schema for a successful upload response."""

    message: str
    url: str


def build_storage_key(upload_dir: str, filename: str) -> str:
    """Build the object key for an uploaded file.

    Spaces in the filename become underscores, the prefix is joined with a
    single "/", and any backslash is turned into a forward slash. Nothing
    else is sanitized: ``..`` segments and unusual characters pass through.

    Example:
        >>> build_storage_key("uploads", "My Photo.png")
        'uploads/My_Photo.png'
    """
    sanitized = filename.replace(" ", "_")
    prefix = upload_dir.rstrip("/\\")
    key = f"{prefix}/{sanitized}" if prefix else sanitized
    return key.replace("\\", "/")


def build_public_url(public_url_base: str, key: str) -> str:
    """Join the public URL base and an object key with one "/"."""
    return public_url_base + "/" + key.replace("\\", "/")


class UploadService:
    """Runs the upload workflow against injected collaborators."""

    def __init__(self, object_store: ObjectStore, catalog: ImageCatalog, config: StorageConfig) -> None:
        self._object_store = object_store
        self._catalog = catalog
        self._config = config

    async def upload(
        self,
        filename: str,
        body: BinaryIO,
        metadata: ImageMetadata,
        content_type: str | None = None,
    ) -> UploadResponse:
        """Store one file and catalog it.

        Args:
            filename: Client-supplied filename, stored verbatim in the catalog
            body: Readable binary stream with the file contents
            metadata: Classification fields from the form
            content_type: MIME type forwarded to the object store

        Returns:
            UploadResponse with the public URL of the object

        Raises:
            UploadFailedError: If the object store write fails
            ServerConfigurationError: If PUBLIC_URL_BASE is not set
        """
        bucket = self._config.s3_bucket
        key = build_storage_key(self._config.upload_dir, filename)

        try:
            await self._object_store.put_object(bucket, key, body, content_type)
        except ObjectStoreError as e:
            logger.error("object_write_failed", bucket=bucket, key=key, error=str(e))
            raise UploadFailedError(detail={"key": key}) from e

        public_base = self._config.public_url_base
        if not public_base:
            # The object stays in the bucket without a catalog row
            logger.error("public_url_base_missing", bucket=bucket, key=key)
            raise ServerConfigurationError()

        url = build_public_url(public_base, key)
        await self.finalize_upload(filename=filename, key=key, bucket=bucket, url=url, metadata=metadata)

        logger.info("image_uploaded", bucket=bucket, key=key, url=url)
        return UploadResponse(message=UPLOAD_SUCCESS_MESSAGE, url=url)

    async def finalize_upload(
        self,
        *,
        filename: str,
        key: str,
        bucket: str,
        url: str,
        metadata: ImageMetadata,
    ) -> ImageRecord | None:
        """Record catalog metadata for an object that is already stored.

        Best-effort: any catalog failure, including a refused connection, is
        logged and ``None`` is returned. The upload itself still counts as
        successful.
        """
        if metadata.product_name:
            logger.debug("product_name_not_persisted", key=key, product_name=metadata.product_name)

        try:
            return await self._catalog.insert(
                filename=filename,
                s3_key=key,
                s3_bucket=bucket,
                url=url,
                category=metadata.category,
                sub_category=metadata.sub_category,
                name=metadata.name,
            )
        except Exception:
            # Driver-level errors (asyncpg OSError) are not wrapped by SQLAlchemy
            logger.exception("catalog_insert_failed", bucket=bucket, key=key)
            return None
