"""Image catalog: the metadata store for uploaded images."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from image_dock.models.image import ImageRecord
from image_dock.repository.image_repository import ImageRepository

__all__ = ["ImageCatalog"]

logger = structlog.get_logger(__name__)


class ImageCatalog:
    """Insert and query ImageRecord rows.

    Each call runs in its own session and transaction, so an insert either
    commits fully or raises after rolling back.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the catalog.

        Args:
            session_factory: Session maker bound to the application engine
        """
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def insert(
        self,
        *,
        filename: str,
        s3_key: str,
        s3_bucket: str,
        url: str | None,
        category: str,
        sub_category: str,
        name: str,
    ) -> ImageRecord:
        """Persist one image record.

        Returns:
            The committed record with ``id`` and ``uploaded_at`` populated

        Raises:
            SQLAlchemyError: If the insert or commit fails
        """
        async with self._session() as session:
            repo = ImageRepository(session)
            record = await repo.create(
                filename=filename,
                s3_key=s3_key,
                s3_bucket=s3_bucket,
                url=url,
                category=category,
                sub_category=sub_category,
                name=name,
            )
            await repo.commit()

        logger.info(
            "image_record_stored",
            image_id=record.id,
            filename=filename,
            s3_key=s3_key,
            category=category,
            sub_category=sub_category,
            name=name,
        )
        return record

    async def get_by_id(self, image_id: int) -> ImageRecord | None:
        async with self._session() as session:
            return await ImageRepository(session).get_by_id(image_id)

    async def list_all(
        self, category: str | None = None, sub_category: str | None = None
    ) -> list[ImageRecord]:
        """List records newest first, optionally filtered by category."""
        async with self._session() as session:
            return await ImageRepository(session).list_all(
                category=category, sub_category=sub_category
            )
