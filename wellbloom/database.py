"""
WellBloom Backend: Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with a bounded connection pool and provides a
       session dependency that commits on success and rolls back on error.
Who:   Route handlers receive the session through FastAPI's Depends() and pass
       it explicitly to every service call (the session is the store handle).
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling Strategy:
    pool_size=10, max_overflow=0: fixed ceiling of concurrent connections
    pool_timeout=30:  how long a request may wait for a free slot
    pool_pre_ping:    validates connections before use
    pool_recycle=3600: recycles connections every hour

    Each request holds exactly one connection for its duration and returns
    it to the pool when the session closes, whether or not it failed.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from wellbloom.config import settings


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create the async engine for the given URL.

    SQLite (used by the test suite) does not accept queue-pool sizing
    arguments, so those are only passed for server databases.
    """
    options = {"echo": settings.log_level == "DEBUG"}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **options)


engine = build_engine(settings.database_url)

# expire_on_commit=False: response models are built from ORM objects after
# the handler returns, outside the session's active transaction.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object used by Alembic and by the test suite
    to create the schema.
    """
    pass


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory (acquires a pool slot lazily)
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    All check-then-write sequences of one request therefore run inside
    a single transaction.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Gracefully closes all pooled connections on shutdown."""
    await engine.dispose()
