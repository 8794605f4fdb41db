from datetime import datetime
from uuid import UUID
from sqlalchemy import delete, select, update
from pawhub.models.token import RefreshToken
from pawhub.repositories.base import BaseRepository
from sqlalchemy.ext.asyncio import AsyncSession

class TokenRepository(BaseRepository[RefreshToken]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, RefreshToken)

    async def get_by_digest(self, token_hash: str, for_update: bool = False) -> RefreshToken | None:
        query = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def revise(self, token_id: UUID, revoked_at: datetime, replaced_by_id: UUID | None = None) -> bool:
        """Revoke a live row. Returns False when the row was already revoked (or is gone)."""
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.id == token_id,
                RefreshToken.revoked_at.is_(None),
            )
            .values(revoked_at=revoked_at, replaced_by_id=replaced_by_id)
        )
        result = await self.db.execute(stmt)
        await self.db.flush()
        return result.rowcount == 1

    async def revoke_all_for_user(self, user_id: UUID, revoked_at: datetime) -> int:
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.user_id == user_id,
                RefreshToken.revoked_at.is_(None),
            )
            .values(revoked_at=revoked_at)
        )
        result = await self.db.execute(stmt)
        await self.db.flush()
        return result.rowcount

    async def purge_expired(self, now: datetime) -> int:
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.db.flush()
        return result.rowcount
