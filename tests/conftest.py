"""
Shared test fixtures for the Workforce test suite.

Every test that touches the API or the database gets its own in-memory
SQLite database (aiosqlite + StaticPool), wired into the app through a ``get_db`` override.
"""

import itertools
import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
# CORS (JSON format)
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from workforce.api.v1.endpoints.auth import limiter
from workforce.core.security import create_access_token, get_password_hash
from workforce.db.base import Base
from workforce.db.session import build_engine, build_session_factory, get_db
from workforce.main import app
from workforce.models.user import User

TEST_PASSWORD = "secret123"
# Hash once; bcrypt is deliberately slow.
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)

# Rate limits are exercised explicitly in test_auth.py
limiter.enabled = False


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create a fresh database per test and route the app's sessions to it."""
    engine = build_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = build_session_factory(engine)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db

    yield factory

    app.dependency_overrides.pop(get_db, None)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


# ── Users & auth ────────────────────────────────────────────────────
@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory: ``await make_user("manager")`` inserts and returns a user."""
    counter = itertools.count(1)

    async def _make(role: str = "employee", *, is_active: bool = True, department: str | None = None) -> User:
        n = next(counter)
        user = User(
            username=f"{role}{n}",
            email=f"{role}{n}@example.com",
            name=f"{role.title()} {n}",
            role=role,
            department=department,
            is_active=is_active,
            hashed_password=TEST_PASSWORD_HASH,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    """Factory: bearer headers for a given user."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture
async def employee(make_user) -> User:
    return await make_user("employee")


@pytest.fixture
async def manager(make_user) -> User:
    return await make_user("manager")


@pytest.fixture
async def admin(make_user) -> User:
    return await make_user("admin")
