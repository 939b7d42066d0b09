"""
WellBloom Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite +
       StaticPool, so all sessions share the one connection) with the
       full schema created from the ORM metadata.

Fixture Hierarchy:
    engine          fresh in-memory database with all tables
    ├── session_factory
    │   ├── db_session     one AsyncSession for service-level tests
    │   └── client         HTTPX AsyncClient; each request gets its own session
    mock_db_session         AsyncMock session for storage-failure tests
"""

import os

# Override settings for testing BEFORE any wellbloom imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"  # Fastest cost factor bcrypt accepts
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import wellbloom.models  # noqa: E402,F401
from wellbloom.database import Base, get_db_session  # noqa: E402
from wellbloom.models.admin import AdminRole  # noqa: E402
from wellbloom.schemas.activity import ActivityCreate  # noqa: E402
from wellbloom.schemas.admin import AdminRegister  # noqa: E402
from wellbloom.schemas.emotion import EmotionCreate, EmotionRecordCreate  # noqa: E402
from wellbloom.schemas.user import UserCreate  # noqa: E402
from wellbloom.services.activity_service import activity_service  # noqa: E402
from wellbloom.services.admin_service import admin_service  # noqa: E402
from wellbloom.services.emotion_record_service import emotion_record_service  # noqa: E402
from wellbloom.services.emotion_service import emotion_service  # noqa: E402
from wellbloom.services.user_service import user_service  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite ignores foreign keys unless asked
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT 1", {}, Exception())
        await user_service.list_users(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def client(session_factory):
    """
    HTTPX AsyncClient wired to the app, with get_db_session pointed at the
    test database (same commit/rollback behavior as production).

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from wellbloom.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


# ══════════════════════════════════════════════════════════════════════════
# Data Builders
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    async def _make_user(name: str = "Lucía Pérez", **overrides):
        counter["n"] += 1
        data = {
            "name": name,
            "email": f"user{counter['n']}@wellbloom.io",
            "password": "s3cure-password",
            "section": "Ingeniería",
        }
        data.update(overrides)
        return await user_service.create_user(db_session, UserCreate(**data))

    return _make_user


@pytest.fixture
def make_emotion(db_session):
    async def _make_emotion(name: str, score: int = 5, description: str = None):
        return await emotion_service.create_emotion(
            db_session, EmotionCreate(name=name, score=score, description=description)
        )

    return _make_emotion


@pytest.fixture
def make_record(db_session):
    async def _make_record(user_id: int, emotion_id: int):
        return await emotion_record_service.create_record(
            db_session, EmotionRecordCreate(user_id=user_id, emotion_id=emotion_id)
        )

    return _make_record


@pytest.fixture
def make_activity(db_session):
    async def _make_activity(name: str = "Respiración consciente", **fields):
        return await activity_service.create_activity(db_session, ActivityCreate(name=name, **fields))

    return _make_activity


@pytest.fixture
def make_admin(db_session):
    counter = {"n": 0}

    async def _make_admin(role: AdminRole = AdminRole.MODERATOR, **overrides):
        counter["n"] += 1
        data = {
            "name": f"Admin {counter['n']}",
            "email": f"admin{counter['n']}@wellbloom.io",
            "password": "admin-password",
            "role": role,
        }
        data.update(overrides)
        return await admin_service.register(db_session, AdminRegister(**data))

    return _make_admin
