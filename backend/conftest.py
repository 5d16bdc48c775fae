"""Global pytest fixtures for testing."""

import contextlib
import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import dotenv
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from rex_api.main import app
from rex_core.auth import JWTConfig, create_access_token
from rex_core.schemas import ProfileCreate, UserProfile
from rex_core.services import UserService
from rex_database import Base
from rex_database.session import get_session

with contextlib.suppress(OSError):
    dotenv.load_dotenv()


class MockArqRedis:
    """Mock ArqRedis for testing."""

    def __init__(self):
        self.enqueued_jobs: list[tuple[str, tuple[Any, ...]]] = []
        self._store: dict[str, Any] = {}
        self._ttl: dict[str, int] = {}
        self._job_ids: set[str] = set()

    async def enqueue_job(
        self, func_name: str, *args: Any, _job_id: str | None = None, **kwargs: Any
    ) -> None:
        """
        Mock enqueue_job that records calls without actually queuing.

        Like arq, a job whose ``_job_id`` was already used is dropped.
        """
        if _job_id is not None:
            if _job_id in self._job_ids:
                return
            self._job_ids.add(_job_id)
        self.enqueued_jobs.append((func_name, args))

    async def setex(self, key: str, ttl_seconds: int, value: Any) -> bool:
        self._store[key] = value
        self._ttl[key] = ttl_seconds
        return True

    async def get(self, key: str) -> Any:
        return self._store.get(key)

    async def delete(self, *keys: str) -> int:
        deleted = 0
        for key in keys:
            if key in self._store:
                deleted += 1
                self._store.pop(key, None)
                self._ttl.pop(key, None)
        return deleted

    async def ttl(self, key: str) -> int:
        return self._ttl.get(key, -1)

    def reset(self) -> None:
        """Reset all in-memory redis state."""
        self.enqueued_jobs.clear()
        self._job_ids.clear()
        self._store.clear()
        self._ttl.clear()

    def seed(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        """Seed redis key/value directly for tests."""
        self._store[key] = value
        if ttl_seconds is not None:
            self._ttl[key] = ttl_seconds

    def has_key(self, key: str) -> bool:
        """Return whether key exists in mock store."""
        return key in self._store


# Global mock redis instance for testing
mock_redis = MockArqRedis()

# Test database URL - in-memory SQLite unless TEST_DATABASE_URL points elsewhere
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# Safety check: ensure tests only run on a test database
if ":memory:" not in TEST_DATABASE_URL and "test" not in TEST_DATABASE_URL:
    raise RuntimeError(
        f"Safety check failed: TEST_DATABASE_URL must point to a test database "
        f"(name should contain 'test'). Current: {TEST_DATABASE_URL}"
    )

TEST_SECRET_KEY = "test-secret-key"


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine with a fresh schema."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory database
        engine = create_async_engine(
            TEST_DATABASE_URL,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    session_factory = async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
def jwt_config() -> JWTConfig:
    """JWT configuration matching the API settings patched in ``client``."""
    return JWTConfig(secret_key=TEST_SECRET_KEY)


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, jwt_config: JWTConfig
) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with database, redis and token overrides."""
    from rex_api.dependencies import get_jwt_config, get_redis_pool

    async def override_get_session():
        yield db_session

    async def override_get_redis_pool():
        return mock_redis

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_redis_pool] = override_get_redis_pool
    app.dependency_overrides[get_jwt_config] = lambda: jwt_config

    # Reset mock redis state before each test
    mock_redis.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def test_mock_redis() -> MockArqRedis:
    """Provide access to the mock redis instance for testing."""
    return mock_redis


@pytest.fixture
def token_for(jwt_config: JWTConfig) -> Callable[..., str]:
    """Mint a bearer token for an identity provider uid."""

    def _token(user_id: str, **claims: Any) -> str:
        return create_access_token(user_id, jwt_config, extra_claims=claims or None)

    return _token


@pytest.fixture
def headers_for(token_for: Callable[..., str]) -> Callable[[str], dict[str, str]]:
    """Build auth headers for a uid."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_for(user_id)}"}

    return _headers


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[UserProfile]]:
    """Factory creating users with completed profiles."""

    async def _make_user(user_id: str, name: str, username: str | None = None) -> UserProfile:
        return await UserService(db_session).create_profile(
            user_id, ProfileCreate(name=name, username=username)
        )

    return _make_user


@pytest_asyncio.fixture
async def test_user(make_user) -> UserProfile:
    """Create a test user."""
    return await make_user("uid-test", "Test User", "testuser")


@pytest_asyncio.fixture
async def auth_headers(test_user: UserProfile, headers_for) -> dict[str, str]:
    """Generate auth headers for test user."""
    return headers_for(test_user.id)
