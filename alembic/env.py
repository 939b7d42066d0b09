"""
Alembic Migration Environment
==============================

What:  Runs WellBloom migrations against DATABASE_URL from wellbloom.config,
       so the app and its migrations always target the same database
       (the sqlalchemy.url in alembic.ini is only a placeholder).
How:   Offline mode renders SQL with literal binds. Online mode opens a
       NullPool async engine and hands a sync connection to Alembic via
       run_sync(). SQLite runs in batch mode because it cannot ALTER
       constraints in place.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from wellbloom.config import settings
from wellbloom.database import Base

# Registers every table on Base.metadata for --autogenerate
import wellbloom.models  # noqa: F401

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _configure(**options) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        render_as_batch=settings.is_sqlite,
        **options,
    )


def _migrate(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online() -> None:
    engine = create_async_engine(settings.database_url, poolclass=NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()
else:
    asyncio.run(_migrate_online())
