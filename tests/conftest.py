"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from datetime import datetime
from pathlib import Path
from uuid import uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.cache.profile_view_cache import InMemoryProfileViewCache
from infrastructure.database.models import Base, ProfileModel

# One connection shared by every session, so the in-memory database survives
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_USER_ID = uuid4()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory bound to the test engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def test_user() -> TokenUser:
    """The authenticated caller used by API tests."""
    return TokenUser(
        id=TEST_USER_ID,
        email="a@x.com",
        first_name="Ann",
        role="authenticated",
    )


@pytest.fixture
async def profile_row(
    session_factory: async_sessionmaker[AsyncSession], test_user: TokenUser
) -> ProfileModel:
    """Insert the test user's profile, as the signup trigger would."""
    created = datetime(2026, 1, 28, 10, 0, 0)
    row = ProfileModel(
        id=test_user.id,
        email=test_user.email,
        first_name="Ann",
        avatar_url=None,
        created_at=created,
        updated_at=created,
    )
    async with session_factory() as session:
        session.add(row)
        await session.commit()
    return row


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def view_cache() -> InMemoryProfileViewCache:
    return InMemoryProfileViewCache(ttl_seconds=60)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def test_app(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
    view_cache: InMemoryProfileViewCache,
) -> FastAPI:
    """
    App wired to the in-memory database.

    - The auth provider validates tokens signed with the test secret
    - The profile service uses a UoW bound to the test session factory
    - The view cache is the per-test ``view_cache`` fixture
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import get_profile_service, get_profile_view_cache
    from domain.services.profile_service import ProfileService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    service = ProfileService(test_uow_factory, view_cache=view_cache)

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_profile_service] = lambda: service
    app.dependency_overrides[get_profile_view_cache] = lambda: view_cache
    return app


@pytest.fixture
async def authenticated_client(
    test_app: FastAPI,
    auth_headers: dict[str, str],
) -> AsyncGenerator[AsyncClient, None]:
    """Client that sends a valid bearer token for ``test_user``."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers
    ) as c:
        yield c

    test_app.dependency_overrides.clear()
