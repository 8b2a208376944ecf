"""Alembic environment for the donation database.

Online migrations run on the async engine URL from application settings;
offline (SQL script) migrations use the synchronous pymysql driver.
"""

import asyncio
from logging.config import fileConfig

from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from sqlmodel import SQLModel

from alembic import context

load_dotenv()

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Register donation tables on SQLModel.metadata for autogenerate
from src.core.config import get_settings  # noqa: E402
from src.models.transaction import Transaction  # noqa: F401, E402
from src.models.user import User  # noqa: F401, E402

target_metadata = SQLModel.metadata
DATABASE_URL = get_settings().database_url


def run_migrations_offline() -> None:
    """Emit migration SQL without connecting."""
    context.configure(
        url=DATABASE_URL.replace("+aiomysql", "+pymysql"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Run migrations on a short-lived async engine."""
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = DATABASE_URL

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
