from typing import Annotated
from fastapi import APIRouter, Cookie, Response, status
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request
from pawhub.api.deps import auth_service_dependency, config_dependency, identity_dependency
from pawhub.core.cookies import REFRESH_COOKIE_NAME, clear_refresh_cookie, set_refresh_cookie
from pawhub.core.exceptions import ConflictException, UnauthorizedException
from pawhub.core.results import Err
from pawhub.schemas.token import AccessTokenResponse, Identity
from pawhub.schemas.user import LoginRequest, RegisterRequest, UserResponse

router = APIRouter()

limiter = Limiter(key_func=get_remote_address)

refresh_cookie = Annotated[str | None, Cookie(alias=REFRESH_COOKIE_NAME)]


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def register(request: Request, body: RegisterRequest, service: auth_service_dependency):
    result = await service.register(body)
    if isinstance(result, Err):
        raise ConflictException(detail="Phone number or email already exists")
    return result.value


@router.post("/login", response_model=AccessTokenResponse)
@limiter.limit("5/minute")
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    service: auth_service_dependency,
    config: config_dependency,
) -> AccessTokenResponse:
    result = await service.login(body.phone_number, body.password)
    if isinstance(result, Err):
        raise UnauthorizedException(detail="Invalid credentials")

    identity = result.value
    access = service.mint_access_token(identity)
    refresh = await service.issue_refresh_token(
        identity.subject_id,
        user_agent=request.headers.get("user-agent"),
        ip_address=_client_ip(request),
    )
    set_refresh_cookie(response, refresh, config, now=service.clock())
    return AccessTokenResponse(access_token=access.token, expires_at=access.expires_at)


@router.post("/refresh", response_model=AccessTokenResponse)
@limiter.limit("10/minute")
async def refresh(
    request: Request,
    response: Response,
    service: auth_service_dependency,
    config: config_dependency,
    refresh_token: refresh_cookie = None,
) -> AccessTokenResponse:
    if not refresh_token:
        raise UnauthorizedException(detail="Invalid refresh token")

    result = await service.rotate_refresh_token(
        refresh_token,
        user_agent=request.headers.get("user-agent"),
        ip_address=_client_ip(request),
    )
    if isinstance(result, Err):
        raise UnauthorizedException(detail="Invalid refresh token")

    rotated = result.value
    access = service.mint_access_token(rotated.identity)
    set_refresh_cookie(response, rotated.refresh, config, now=service.clock())
    return AccessTokenResponse(access_token=access.token, expires_at=access.expires_at)


# Logout lives on the refresh path: the cookie is scoped to it and is not sent anywhere else.
@router.delete("/refresh", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    response: Response,
    service: auth_service_dependency,
    config: config_dependency,
    refresh_token: refresh_cookie = None,
) -> None:
    if refresh_token:
        await service.revoke_refresh_token(refresh_token)
    clear_refresh_cookie(response, config)


@router.get("/me", response_model=Identity)
async def me(identity: identity_dependency) -> Identity:
    return identity
