"""Integration test fixtures for database and HTTP client operations.

The database is in-memory SQLite shared through a StaticPool, so every
session in a test (fixtures and request handlers alike) sees the same data.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator

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
from sqlmodel import SQLModel

from src.research_hub import models  # noqa: F401 - registers tables on the metadata
from src.research_hub.api.dependencies import get_db_session
from src.research_hub.api.dependencies.storage import get_oauth, get_store
from src.research_hub.core.health import reset_health_cache
from src.research_hub.main import create_app
from src.research_hub.models import UserProfile
from src.research_hub.services import AttachmentService
from tests.factories import UserProfileFactory
from tests.helpers import InMemoryObjectStore, StubOAuthClient, save


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database with every table created."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for arranging data and asserting on it.

    Changes are only visible to request handlers after `await session.commit()`.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def attachments(object_store: InMemoryObjectStore) -> AttachmentService:
    return AttachmentService(object_store)


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    object_store: InMemoryObjectStore,
    oauth_client: StubOAuthClient,
) -> FastAPI:
    """Application wired to the test database, object store and OAuth stub."""
    reset_health_cache()
    application = create_app()

    async def _get_test_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = _get_test_session
    application.dependency_overrides[get_store] = lambda: object_store
    application.dependency_overrides[get_oauth] = lambda: oauth_client
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
async def student(db_session: AsyncSession) -> UserProfile:
    profile = UserProfileFactory.student()
    await save(db_session, profile)
    return profile


@pytest.fixture
async def other_student(db_session: AsyncSession) -> UserProfile:
    profile = UserProfileFactory.student(name="Second Student")
    await save(db_session, profile)
    return profile


@pytest.fixture
async def teacher(db_session: AsyncSession) -> UserProfile:
    profile = UserProfileFactory.teacher()
    await save(db_session, profile)
    return profile


@pytest.fixture
async def other_teacher(db_session: AsyncSession) -> UserProfile:
    profile = UserProfileFactory.teacher(name="Second Teacher")
    await save(db_session, profile)
    return profile


@pytest.fixture
async def admin(db_session: AsyncSession) -> UserProfile:
    profile = UserProfileFactory.admin()
    await save(db_session, profile)
    return profile
