import hashlib
import secrets
from datetime import datetime, timezone
from typing import Any, Callable

from jose import jwt, JWTError
from passlib.context import CryptContext
from passlib.exc import UnknownHashError
from pydantic import ValidationError

from pawhub.core.config import AuthConfig
from pawhub.schemas.token import AccessToken, Identity, TokenPayload


Clock = Callable[[], datetime]

MIN_TOKEN_BYTES = 32

# bcrypt_sha256 pre-hashes, so bytes past bcrypt's 72-byte window still count.
pwd_context = CryptContext(schemes=['bcrypt_sha256', 'bcrypt'], deprecated="auto")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ------------------------------------------------------------------
# Passwords
# ------------------------------------------------------------------

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError, UnknownHashError):
        return False

def dummy_verify_password() -> None:
    """Burn the same time as a real verification for unknown accounts."""
    pwd_context.dummy_verify()


# ------------------------------------------------------------------
# Opaque refresh tokens
# ------------------------------------------------------------------

def new_token(byte_length: int = 64) -> str:
    if byte_length < MIN_TOKEN_BYTES:
        raise ValueError(f"Opaque tokens need at least {MIN_TOKEN_BYTES} random bytes")
    return secrets.token_urlsafe(byte_length)

def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


# ------------------------------------------------------------------
# Access tokens
# ------------------------------------------------------------------

def create_access_token(identity: Identity, config: AuthConfig, now: datetime | None = None) -> AccessToken:
    issued_at = now or utc_now()
    expire = issued_at + config.access_token_ttl
    to_encode: dict[str, Any] = {
        "sub": str(identity.subject_id),
        "role": identity.role.value,
        "type": "access",
        "iat": int(issued_at.timestamp()),
        "exp": int(expire.timestamp()),
    }
    token = jwt.encode(to_encode, config.secret_key, algorithm=config.algorithm)
    return AccessToken(token=token, expires_at=expire)

def decode_access_token(token: str, config: AuthConfig, now: datetime | None = None) -> TokenPayload | None:
    """Return the verified claims, or None for any invalid, foreign or expired token."""
    try:
        # Expiry is compared against the caller's clock below.
        claims = jwt.decode(
            token,
            config.secret_key,
            algorithms=[config.algorithm],
            options={"verify_exp": False},
        )
        payload = TokenPayload(**claims)
    except (JWTError, ValidationError, TypeError):
        return None
    if payload.type != "access":
        return None
    if payload.exp <= (now or utc_now()).timestamp():
        return None
    return payload
