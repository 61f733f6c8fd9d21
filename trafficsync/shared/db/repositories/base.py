"""Base repository with common CRUD queries."""

from typing import TypeVar, Generic, Optional, List, Type, Any
from uuid import UUID

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Base

T = TypeVar("T", bound=Base)


class Repository(Generic[T]):
    """
    Base repository bound to one session.

    Subclasses set `model`; the session's transaction is owned by the caller.
    """

    model: Type[T]

    def __init__(self, session: AsyncSession):
        self.session = session

    def _base_query(self):
        """Get base query for the model."""
        return select(self.model)

    async def get_by_id(self, id: UUID) -> Optional[T]:
        """Get entity by ID."""
        query = self._base_query().where(self.model.id == id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[T]:
        """Get all entities, oldest first."""
        query = self._base_query().order_by(self.model.created_at)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create(self, entity: T) -> T:
        """Create a new entity."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update_fields(self, id: UUID, fields: dict[str, Any]) -> Optional[T]:
        """
        Apply a sparse field set to an entity and return the stored row.

        Read-modify-write inside the caller's transaction; no version check.
        """
        entity = await self.get_by_id(id)
        if entity is None:
            return None
        for name, value in fields.items():
            setattr(entity, name, value)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, id: UUID) -> bool:
        """Delete an entity by ID."""
        query = delete(self.model).where(self.model.id == id)
        result = await self.session.execute(query)
        return result.rowcount > 0

    async def count(self) -> int:
        """Get total count of entities."""
        query = select(func.count()).select_from(self.model)
        result = await self.session.execute(query)
        return result.scalar_one()
