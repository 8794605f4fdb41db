from typing import Annotated
from fastapi import Depends
from pawhub.core.config import AuthConfig, get_auth_config
from pawhub.core.exceptions import ForbiddenException, UnauthorizedException
from pawhub.core.database import get_db
from pawhub.core.results import Err
from pawhub.core.security import Clock, utc_now
from pawhub.models.enums import UserRole
from sqlalchemy.ext.asyncio import AsyncSession
from pawhub.repositories.user_repo import UserRepository
from pawhub.repositories.token_repo import TokenRepository
from pawhub.schemas.token import Identity
from pawhub.services.auth_service import AuthService
from pawhub.services.request_gate import RequestGate
from pawhub.services.user_service import UserService
from fastapi.security import OAuth2PasswordBearer

db_dependency = Annotated[AsyncSession, Depends(get_db)]
config_dependency = Annotated[AuthConfig, Depends(get_auth_config)]
# auto_error is off so a missing header gets the same answer as a bad token.
reusable_oauth2 = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def get_clock() -> Clock:
    return utc_now

clock_dependency = Annotated[Clock, Depends(get_clock)]


async def get_user_repo(db: db_dependency) -> UserRepository:
    return UserRepository(db)

user_dependency = Annotated[UserRepository, Depends(get_user_repo)]


async def get_token_repo(db: db_dependency) -> TokenRepository:
    return TokenRepository(db)

token_dependency = Annotated[TokenRepository, Depends(get_token_repo)]


async def get_auth_service(
    user_repo: user_dependency,
    token_repo: token_dependency,
    config: config_dependency,
    clock: clock_dependency,
) -> AuthService:
    return AuthService(user_repo, token_repo, config, clock)

auth_service_dependency = Annotated[AuthService, Depends(get_auth_service)]


async def get_user_service(user_repo: user_dependency, auth_service: auth_service_dependency) -> UserService:
    return UserService(user_repo, auth_service)


def get_request_gate(config: config_dependency, clock: clock_dependency) -> RequestGate:
    return RequestGate(config, clock)


async def get_current_identity(
    token: Annotated[str | None, Depends(reusable_oauth2)],
    gate: Annotated[RequestGate, Depends(get_request_gate)],
) -> Identity:
    result = gate.authenticate(token)
    if isinstance(result, Err):
        raise UnauthorizedException(detail="Invalid or missing access token")
    return result.value

identity_dependency = Annotated[Identity, Depends(get_current_identity)]


def require_role(role: UserRole):
    async def role_checker(identity: identity_dependency) -> Identity:
        if identity.role != role:
            raise ForbiddenException(detail="Insufficient role")
        return identity
    return role_checker
