"""
Generic async repository over one SQLAlchemy model.

A repository never opens or closes sessions; the caller owns the session and
decides when to commit. Failed writes roll the session back before the error
propagates, so the session is reusable afterwards.

Usage:
    class ImageRepository(BaseRepository[ImageRecord, int]):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(ImageRecord, session)

    async with AsyncDBPool.session_maker()() as session:
        repo = ImageRepository(session)
        record = await repo.create(filename="a.png", ...)
        await repo.commit()
"""

from abc import ABC
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

__all__ = ["BaseRepository"]

ModelType = TypeVar("ModelType")
IDType = TypeVar("IDType", int, str)


class BaseRepository(Generic[ModelType, IDType], ABC):
    """Create and look up rows of ``model`` inside a caller-owned session."""

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    async def _rollback_on_error(self, operation: Any) -> Any:
        try:
            return await operation
        except SQLAlchemyError:
            await self.session.rollback()
            raise

    async def create(self, **values: Any) -> ModelType:
        """Add a row and flush it.

        The instance is refreshed after the flush so server-side defaults
        (autoincrement id, ``now()`` timestamps) are populated.

        Raises:
            SQLAlchemyError: If the flush fails; the session is rolled back
        """
        instance = self.model(**values)
        self.session.add(instance)
        await self._rollback_on_error(self.session.flush())
        await self._rollback_on_error(self.session.refresh(instance))
        return instance

    async def get_by_id(self, id: IDType) -> ModelType | None:
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def commit(self) -> None:
        """Commit the session, rolling back if the commit fails."""
        await self._rollback_on_error(self.session.commit())
