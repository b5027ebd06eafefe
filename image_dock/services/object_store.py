"""
S3 object store client.

Wraps a boto3 S3 client behind the two calls the service needs: write one
object and list keys under a prefix. Works against AWS S3 or any
S3-compatible endpoint (R2, MinIO) via ``S3_ENDPOINT``.

boto3 is blocking, so every call is pushed to the thread pool. A single boto3
client is safe to share between threads.
"""

from typing import Any, BinaryIO, Protocol

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from image_dock.main_config import StorageConfig

__all__ = ["ObjectStore", "ObjectStoreError", "S3ObjectStore"]

logger = structlog.get_logger(__name__)


class ObjectStoreError(Exception):
    """Raised when the storage backend rejects or fails a call."""


class ObjectStore(Protocol):
    async def put_object(
        self, bucket: str, key: str, body: BinaryIO, content_type: str | None = None
    ) -> None: ...

    async def list_keys(self, bucket: str, prefix: str) -> list[str]: ...


class S3ObjectStore:
    """ObjectStore backed by boto3."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: StorageConfig) -> "S3ObjectStore":
        """Build a client from storage settings.

        Unset credentials fall through to boto3's default provider chain
        (env vars, shared config, instance role).
        """
        secret = config.aws_secret_access_key.get_secret_value() if config.aws_secret_access_key else None
        client = boto3.client(
            "s3",
            endpoint_url=config.s3_endpoint or None,
            region_name=config.s3_region or None,
            aws_access_key_id=config.aws_access_key_id or None,
            aws_secret_access_key=secret,
        )
        logger.info(
            "s3_client_created",
            bucket=config.s3_bucket,
            endpoint=config.s3_endpoint or "aws",
            region=config.s3_region,
        )
        return cls(client)

    async def put_object(
        self, bucket: str, key: str, body: BinaryIO, content_type: str | None = None
    ) -> None:
        """Write ``body`` to ``s3://bucket/key``, replacing any existing object.

        Raises:
            ObjectStoreError: If the backend call fails
        """
        extra_args = {"ContentType": content_type} if content_type else {}
        try:
            await run_in_threadpool(
                self._client.put_object, Bucket=bucket, Key=key, Body=body, **extra_args
            )
        except (BotoCoreError, ClientError) as e:
            raise ObjectStoreError(f"put_object failed for s3://{bucket}/{key}: {e}") from e

    async def list_keys(self, bucket: str, prefix: str) -> list[str]:
        """Return every key under ``prefix`` in backend order.

        Follows continuation tokens until the listing is exhausted.

        Raises:
            ObjectStoreError: If any page request fails
        """
        try:
            return await run_in_threadpool(self._list_keys_sync, bucket, prefix)
        except (BotoCoreError, ClientError) as e:
            raise ObjectStoreError(f"list_objects_v2 failed for s3://{bucket}/{prefix}: {e}") from e

    def _list_keys_sync(self, bucket: str, prefix: str) -> list[str]:
        keys: list[str] = []
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
            keys.extend(item["Key"] for item in page.get("Contents", []))
        return keys
