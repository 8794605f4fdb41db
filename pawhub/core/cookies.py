from datetime import datetime, timezone
from starlette.responses import Response
from pawhub.core.config import AuthConfig
from pawhub.core.security import utc_now
from pawhub.schemas.token import IssuedRefreshToken

REFRESH_COOKIE_NAME = "refresh_token"


def refresh_cookie_options(config: AuthConfig) -> dict:
    # Scoped to the refresh path so the token is never sent with other requests.
    return {
        "httponly": True,
        "secure": config.cookie_secure,
        "samesite": "lax",
        "path": config.refresh_cookie_path,
    }


def set_refresh_cookie(
    response: Response,
    issued: IssuedRefreshToken,
    config: AuthConfig,
    now: datetime | None = None,
) -> None:
    max_age = int((issued.expires_at - (now or utc_now())).total_seconds())
    response.set_cookie(
        REFRESH_COOKIE_NAME,
        issued.raw_token,
        max_age=max(max_age, 0),
        expires=issued.expires_at.astimezone(timezone.utc),
        **refresh_cookie_options(config),
    )


def clear_refresh_cookie(response: Response, config: AuthConfig) -> None:
    response.delete_cookie(REFRESH_COOKIE_NAME, **refresh_cookie_options(config))
