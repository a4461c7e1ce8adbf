"""
alembic/env.py

Alembic environment for the Shoreline database.
- Offline mode renders SQL from the configured URL
- Online mode runs migrations through the async engine
"""

import asyncio
from logging.config import fileConfig

from alembic import context

from shoreline.database.base import Base
from shoreline.database.session import engine as async_engine

# Registers every model on Base.metadata
from shoreline.database import models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=async_engine.url.render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync_migrations(connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    async with async_engine.connect() as conn:
        await conn.run_sync(_run_sync_migrations)
    await async_engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
