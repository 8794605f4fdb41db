from typing import Annotated
from uuid import UUID
from fastapi import APIRouter, Depends
from pawhub.api.deps import get_user_service, identity_dependency, require_role
from pawhub.models.enums import UserRole
from pawhub.schemas.token import Identity
from pawhub.schemas.user import UserActiveUpdate, UserResponse
from pawhub.services.user_service import UserService

router = APIRouter()

user_service = Annotated[UserService, Depends(get_user_service)]
admin_dependency = Annotated[Identity, Depends(require_role(UserRole.ADMIN))]


@router.get("/me", response_model=UserResponse)
async def details(identity: identity_dependency, service: user_service):
    return await service.get_user(identity.subject_id)


@router.patch("/{user_id}/active", response_model=UserResponse)
async def set_active(
    user_id: UUID,
    body: UserActiveUpdate,
    admin: admin_dependency,
    service: user_service,
):
    return await service.set_active(user_id, body.is_active)
