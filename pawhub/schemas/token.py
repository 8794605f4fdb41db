from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict
from pawhub.models.enums import UserRole


class Identity(BaseModel):
    """Who the caller is, as far as the token says."""
    subject_id: UUID
    role: UserRole

    model_config = ConfigDict(frozen=True)


class AccessToken(BaseModel):
    token: str
    expires_at: datetime


class IssuedRefreshToken(BaseModel):
    id: UUID
    raw_token: str
    expires_at: datetime


class RotatedSession(BaseModel):
    identity: Identity
    refresh: IssuedRefreshToken


class TokenPayload(BaseModel):
    sub: UUID
    role: UserRole
    exp: int
    type: str


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
