import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from pawhub.api.deps import get_clock
from pawhub.core.config import AuthConfig, get_auth_config
from pawhub.core.database import Base, get_db
from pawhub.main import app
from pawhub.api.v1.auth import limiter as auth_limiter
from pawhub.repositories.token_repo import TokenRepository
from pawhub.repositories.user_repo import UserRepository
from pawhub.services.auth_service import AuthService

# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeClock:
    """A clock the tests can move forward by hand."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# Fresh schema per test: the in-memory database lives as long as the engine.
@pytest.fixture(scope="function")
async def db_engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()

# Fixture to provide a database session for each test, with transaction rollback for isolation
@pytest.fixture(scope="function")
async def db_session(db_engine):
    connection = await db_engine.connect()
    transaction = await connection.begin()

    session = AsyncSession(bind=connection, expire_on_commit=False)

    yield session

    await session.close()
    await transaction.rollback()
    await connection.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def auth_config():
    return AuthConfig(
        secret_key="test-secret-key-not-for-production",
        access_token_ttl=timedelta(minutes=15),
        refresh_token_ttl=timedelta(days=30),
        cookie_secure=False,
    )


@pytest.fixture
def auth_service(db_session, auth_config, clock):
    return AuthService(UserRepository(db_session), TokenRepository(db_session), auth_config, clock)


@pytest.fixture(scope="function")
def setup_app_dependencies(db_session, auth_config, clock):

    async def override_get_db():
        yield db_session
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_config] = lambda: auth_config
    app.dependency_overrides[get_clock] = lambda: clock

    # Disable rate limiting for tests to avoid interference
    original_auth_limiter = auth_limiter.enabled
    auth_limiter.enabled = False

    yield

    app.dependency_overrides.clear()
    auth_limiter.enabled = original_auth_limiter


@pytest.fixture(scope="function")
async def client(setup_app_dependencies):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
