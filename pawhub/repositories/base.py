from typing import Generic, TypeVar, Type, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pawhub.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository providing the row operations shared by every table.

    Repositories never commit: they flush into the session they were given,
    and the owner of that session decides whether the transaction commits
    or rolls back.

    Usage:
        class UserRepository(BaseRepository[User]):
            def __init__(self, db: AsyncSession):
                super().__init__(db, User)
    """

    def __init__(self, db: AsyncSession, model: Type[ModelType]):
        """
        Initialize repository.

        Args:
            db: Async database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    async def create(self, entity: ModelType) -> ModelType:
        """Insert a new entity."""
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity: ModelType) -> ModelType:
        """Flush pending changes on an entity already in the session."""
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def delete(self, entity: ModelType) -> None:
        """Hard delete an entity (permanent)."""
        await self.db.delete(entity)
        await self.db.flush()

    async def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        """
        Get entity by ID.

        Returns:
            Entity if found, None otherwise
        """
        query = select(self.model).where(self.model.id == entity_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def rollback(self) -> None:
        """Discard everything flushed in the current transaction."""
        await self.db.rollback()
