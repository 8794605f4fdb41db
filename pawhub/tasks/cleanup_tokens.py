import asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from pawhub.core.database import AsyncSessionLocal
from pawhub.core.security import utc_now
from pawhub.models.user import User  # noqa: F401  (registers the mapper RefreshToken.user points at)
from pawhub.repositories.token_repo import TokenRepository
import logging

logger = logging.getLogger(__name__)


async def cleanup_expired_tokens(session: AsyncSession | None = None) -> int:
    """
    Delete refresh-token rows past their expiry.

    Revoked rows that are still within their lifetime are kept, so presenting
    an already rotated token is still recognised as a reuse rather than as an
    unknown token.
    """
    if session is None:
        async with AsyncSessionLocal() as own_session:
            async with own_session.begin():
                return await _purge(own_session)
    return await _purge(session)


async def _purge(session: AsyncSession) -> int:
    removed = await TokenRepository(session).purge_expired(utc_now())
    logger.info("Cleaned up %d expired refresh tokens", removed)
    return removed


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(cleanup_expired_tokens())
