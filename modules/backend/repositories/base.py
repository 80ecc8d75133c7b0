"""
Base Repository.

Generic id-keyed access for one model. Methods flush but never commit.
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Subclasses set `model`, e.g. `class NoteRepository(BaseRepository[Note]): model = Note`."""

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id_or_none(self, id: str | UUID) -> ModelType | None:
        result = await self.session.execute(
            select(self.model).where(self.model.id == str(id))
        )
        return result.scalar_one_or_none()

    async def create(self, **values: Any) -> ModelType:
        instance = self.model(**values)
        self.session.add(instance)
        return await self._flush(instance)

    async def _apply(self, instance: ModelType, values: dict[str, Any]) -> ModelType:
        for column, value in values.items():
            if hasattr(instance, column):
                setattr(instance, column, value)
        return await self._flush(instance)

    async def _flush(self, instance: ModelType) -> ModelType:
        await self.session.flush()
        await self.session.refresh(instance)
        return instance
