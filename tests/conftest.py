"""Test fixtures for the short-link service."""

import os

# Settings are read at import time, so the environment must be set first.
os.environ["ENVIRONMENT"] = "testing"
os.environ["DB_CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["SHORTLINK_HASH_ALGORITHM"] = "md5"

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from shortlinks.api.dependencies import get_shortener_engine
from shortlinks.db.session import get_db
from shortlinks.main import app as main_app
# Import models to ensure they're registered with SQLModel metadata
from shortlinks.models.shortlink import ShortLink  # noqa: F401
from shortlinks.repositories.shortlink_repository import ShortLinkRepository
from shortlinks.services.shortener import ShortenerEngine
from tests.utils import TEST_BASE_URL, TEST_SALT


# Test database URL - using SQLite in-memory
TEST_SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory SQLite database for each test."""
    engine = create_async_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    """Session factory bound to the test database."""
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding and inspecting the test database.

    The engine under test opens its own sessions on the same connection, so
    seed data must be committed before calling it.
    """
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def repository() -> ShortLinkRepository:
    """Return a short-link repository instance."""
    return ShortLinkRepository()


@pytest.fixture
def shortener(repository, session_factory) -> ShortenerEngine:
    """Content-hash engine (md5) on the test database."""
    return ShortenerEngine(
        base_url=TEST_BASE_URL,
        salt=TEST_SALT,
        hash_algorithm="md5",
        repository=repository,
        session_factory=session_factory,
    )


@pytest.fixture
def sequential_shortener(repository, session_factory) -> ShortenerEngine:
    """Sequential (base62) engine on the test database."""
    return ShortenerEngine(
        base_url=TEST_BASE_URL,
        salt=TEST_SALT,
        hash_algorithm="base62",
        repository=repository,
        session_factory=session_factory,
    )


@pytest.fixture
def test_app(shortener, session_factory):
    """FastAPI app wired to the test database and engine."""
    async def _override_get_db():
        async with session_factory() as session:
            yield session

    main_app.dependency_overrides[get_db] = _override_get_db
    main_app.dependency_overrides[get_shortener_engine] = lambda: shortener
    yield main_app
    main_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Return an HTTP client talking to the app in-process."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client
