from uuid import UUID
from pawhub.core.exceptions import NotFoundException
from pawhub.models.user import User
from pawhub.repositories.user_repo import UserRepository
from pawhub.services.auth_service import AuthService
import logging

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, user_repo: UserRepository, auth_service: AuthService):
        self.user_repo = user_repo
        self.auth_service = auth_service

    async def get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundException(detail="User not found")
        return user

    async def set_active(self, user_id: UUID, is_active: bool) -> User:
        """Users are never deleted; deactivation blocks login and ends every session."""
        user = await self.get_user(user_id)
        updated_user = await self.user_repo.set_active(user, is_active)
        if not is_active:
            await self.auth_service.revoke_all_for_user(user.id)
        logger.info("User active flag set: user_id=%s is_active=%s", user.id, is_active)
        return updated_user
