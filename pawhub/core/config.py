import re
from datetime import timedelta
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


_DURATION_RE = re.compile(r"^\s*(\d+)\s*([a-z]*)\s*$")
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds", "sec": "seconds", "second": "seconds", "seconds": "seconds",
    "m": "minutes", "min": "minutes", "minute": "minutes", "minutes": "minutes",
    "h": "hours", "hour": "hours", "hours": "hours",
    "d": "days", "day": "days", "days": "days",
}


def parse_duration(text: str) -> timedelta:
    """Parse durations such as "900", "15m", "15 minutes" or "7d"."""
    match = _DURATION_RE.match(text.lower())
    if not match or match.group(2) not in _DURATION_UNITS:
        raise ValueError(f"Invalid duration: {text!r}")
    amount, unit = int(match.group(1)), _DURATION_UNITS[match.group(2)]
    return timedelta(**{unit: amount})


class AuthConfig(BaseModel):
    """Immutable auth policy handed to the services at construction."""

    model_config = ConfigDict(frozen=True)

    secret_key: str
    algorithm: str = "HS256"
    access_token_ttl: timedelta = timedelta(minutes=15)
    refresh_token_ttl: timedelta = timedelta(days=30)
    refresh_token_bytes: int = Field(default=64, ge=32)
    refresh_cookie_path: str = "/api/v1/auth/refresh"
    cookie_secure: bool = True


class Settings(BaseSettings):
    PROJECT_NAME: str = "PawHub"
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_TTL: str = "15m"
    REFRESH_TOKEN_DAYS: int = 30
    REFRESH_TOKEN_BYTES: int = 64
    REFRESH_COOKIE_PATH: str = "/api/v1/auth/refresh"
    ENVIRONMENT: str = "development"
    ALLOWED_ORIGINS: list[str] = []

    model_config = SettingsConfigDict(env_file=".env", frozen=True)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def auth_config(self) -> AuthConfig:
        return AuthConfig(
            secret_key=self.SECRET_KEY,
            algorithm=self.ALGORITHM,
            access_token_ttl=parse_duration(self.ACCESS_TOKEN_TTL),
            refresh_token_ttl=timedelta(days=self.REFRESH_TOKEN_DAYS),
            refresh_token_bytes=self.REFRESH_TOKEN_BYTES,
            refresh_cookie_path=self.REFRESH_COOKIE_PATH,
            cookie_secure=self.is_production,
        )


@lru_cache
def get_settings():
    return Settings()


@lru_cache
def get_auth_config() -> AuthConfig:
    return get_settings().auth_config()
