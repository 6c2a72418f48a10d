"""Base repository: lookup by id and insert for one ORM model."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskline.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id and create.

    Subclasses map ORM rows to application DTOs or domain entities; ORM
    instances never leave the repository.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(
        self, entity_id: int, *, fresh: bool = False
    ) -> ModelType | None:
        """Return a single record by primary key, or None.

        With fresh=True the identity map is bypassed so rows changed by a
        bulk UPDATE in this transaction are re-read.
        """
        model: Any = self.model
        stmt = select(self.model).where(model.id == entity_id)
        if fresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record; server defaults are loaded back."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj
