"""List workflow: project object keys under the upload prefix to public URLs.

Reads the object store only. Catalog rows play no part, so objects whose
metadata insert failed still show up here.
"""

import structlog

from image_dock.core.exceptions import ListFailedError, ServerConfigurationError
from image_dock.main_config import StorageConfig

from .object_store import ObjectStore, ObjectStoreError
from .uploads import build_public_url

__all__ = ["ListingService"]

logger = structlog.get_logger(__name__)


class ListingService:
    def __init__(self, object_store: ObjectStore, config: StorageConfig) -> None:
        self._object_store = object_store
        self._config = config

    async def list_image_urls(self) -> list[str]:
        """Return the public URL of every object under the upload prefix.

        Order is whatever the object store returns (lexicographic by key for S3).

        Raises:
            ListFailedError: If the listing call fails
            ServerConfigurationError: If PUBLIC_URL_BASE is not set
        """
        bucket = self._config.s3_bucket
        prefix = self._config.list_prefix

        try:
            keys = await self._object_store.list_keys(bucket, prefix)
        except ObjectStoreError as e:
            logger.error("list_objects_failed", bucket=bucket, prefix=prefix, error=str(e))
            raise ListFailedError() from e

        public_base = self._config.public_url_base
        if not public_base:
            logger.error("public_url_base_missing", bucket=bucket, prefix=prefix)
            raise ServerConfigurationError()

        logger.debug("images_listed", bucket=bucket, prefix=prefix, count=len(keys))
        return [build_public_url(public_base, key) for key in keys]
