"""Image repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from image_dock.core.base_repository import BaseRepository
from image_dock.models.image import ImageRecord


class ImageRepository(BaseRepository[ImageRecord, int]):
    """Repository for ImageRecord entity operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize ImageRepository with database session.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(ImageRecord, session)

    async def list_all(
        self,
        category: str | None = None,
        sub_category: str | None = None,
    ) -> list[ImageRecord]:
        """List image records, newest first.

        Args:
            category: Filter by exact category
            sub_category: Filter by exact sub-category

        Returns:
            List of ImageRecord instances ordered by upload time descending
        """
        # id breaks ties between rows inserted within the same clock tick
        query = select(self.model).order_by(self.model.uploaded_at.desc(), self.model.id.desc())

        if category is not None:
            query = query.where(self.model.category == category)
        if sub_category is not None:
            query = query.where(self.model.sub_category == sub_category)

        result = await self.session.execute(query)
        return list(result.scalars().all())
