from sqlalchemy import select
from pawhub.models.user import User
from pawhub.repositories.base import BaseRepository
from sqlalchemy.ext.asyncio import AsyncSession

class UserRepository(BaseRepository[User]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_by_phone_number(self, phone_number: str) -> User | None:
        query = select(User).where(User.phone_number == phone_number)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        query = select(User).where(User.email == email)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def set_active(self, user: User, is_active: bool) -> User:
        user.is_active = is_active
        return await self.update(user)
