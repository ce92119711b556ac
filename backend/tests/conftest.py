"""
Roster Backend — Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment is set before any roster import so Settings() picks up
       the test values. API tests run against an in-memory SQLite database
       (aiosqlite + StaticPool) that is created fresh for every test.

Fixture Hierarchy:
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── db_engine → session_factory: in-memory schema per test
    ├── app: create_app() with get_db_session overridden
    ├── test_client: HTTPX AsyncClient on the ASGI app
    └── admin_headers / user_headers: Authorization headers for both roles
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-roster-suite-0123456789abcdef"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "Adm1n!Secret#2024"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, Dict  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import roster.models  # noqa: E402,F401
from roster.database import Base, get_db_session  # noqa: E402
from roster.main import create_app  # noqa: E402
from roster.services.user_service import user_service  # noqa: E402

ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]
USER_PASSWORD = "Str0ng!Passw0rd"


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Mock async database session.

    Usage:
        mock_db_session.execute.return_value = MagicMock(
            scalar_one_or_none=MagicMock(return_value=user)
        )
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


def scalar_result(value) -> MagicMock:
    """A db.execute() result whose scalar_one_or_none() returns value."""
    return MagicMock(scalar_one_or_none=MagicMock(return_value=value))


# ══════════════════════════════════════════════════════════════════════════
# Database & API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def app(session_factory):
    """A fresh app per test: rate-limit counters start empty."""
    application = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_db_session
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    ASGITransport does not run the lifespan, so the admin account is seeded
    by the admin_headers fixture instead.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def login(client: AsyncClient, username: str, password: str) -> Dict[str, str]:
    response = await client.post(
        "/api/auth/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture
async def admin_headers(test_client, session_factory) -> Dict[str, str]:
    async with session_factory() as session:
        await user_service.ensure_admin(session)
        await session.commit()
    return await login(test_client, "admin", ADMIN_PASSWORD)


@pytest_asyncio.fixture
async def user_headers(test_client) -> Dict[str, str]:
    response = await test_client.post(
        "/api/auth/register", json={"username": "alice", "password": USER_PASSWORD}
    )
    assert response.status_code == 201, response.text
    return await login(test_client, "alice", USER_PASSWORD)


@pytest.fixture
def employee_payload() -> Dict[str, str]:
    return {
        "first_name": "Ana",
        "last_name": "Horvat",
        "position": "Developer",
        "department": "IT",
        "email": "ana.horvat@example.com",
    }
