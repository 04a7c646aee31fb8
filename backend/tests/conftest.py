"""Root conftest — shared test configuration and database/client fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test session factory
    - app.state.db_manager replaced so /healthcheck probes the test engine
    - bcrypt runs with the minimum cost factor to keep tests fast

Design Decisions:
    - SQLite in-memory with StaticPool: one shared connection, so every
      session sees the same database
    - Each test builds its own app from explicit Settings: nothing mutates
      process-wide configuration
"""

import os

# Module-level app in api_scaffold.main reads settings at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

import api_scaffold.models  # noqa: F401
from api_scaffold.config import Settings
from api_scaffold.db.base import Base
from api_scaffold.infrastructure.database import DatabaseSessionManager, get_db
from api_scaffold.infrastructure.repository import SqlAlchemyRepository
from api_scaffold.main import create_app
from api_scaffold.services.resources import CATEGORY_RESOURCE, USER_RESOURCE

USER_PASSWORD = "correct horse battery staple"


@pytest.fixture
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        database_create_tables=False,
        jwt_secret="test-secret",
        jwt_issuer="test-issuer",
        jwt_audience="test-audience",
        jwt_expires_seconds=300,
        bcrypt_rounds=4,
        log_format="text",
    )


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
async def client(app, test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    app.state.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.db_manager = None


@pytest.fixture
def user_repository(test_db, test_settings):
    return SqlAlchemyRepository(test_db, USER_RESOURCE, test_settings)


@pytest.fixture
def category_repository(test_db, test_settings):
    return SqlAlchemyRepository(test_db, CATEGORY_RESOURCE, test_settings)


@pytest.fixture
async def seed_user(user_repository):
    """Insert a user (password hashed by the repository)."""
    return await user_repository.create({
        "email": "ada@example.com",
        "name": "Ada Lovelace",
        "password": USER_PASSWORD,
    })


@pytest.fixture
async def auth_headers(client, seed_user):
    res = await client.post(
        "/auth/login",
        json={"email": seed_user.email, "password": USER_PASSWORD},
    )
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}
