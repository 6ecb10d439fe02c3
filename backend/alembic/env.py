"""Alembic environment for the showcase content and upload tables.

The database URL comes from the application settings and can be overridden
per run with ``alembic -x db_url=postgresql+asyncpg://... upgrade head``.
"""
import asyncio
import logging
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from showcase.config import get_settings
from showcase.database import Base
from showcase.models import Admin, Document, SiteSettings, CONTENT_MODELS  # noqa: F401 registers tables

settings = get_settings()
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env.showcase")

target_metadata = Base.metadata


def migration_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("db_url") or settings.DATABASE_URL


def include_object(object, name, type_, reflected, compare_to):
    """Autogenerate only compares tables owned by the showcase models."""
    if type_ == "table":
        return name in target_metadata.tables
    return True


def configure_context(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        include_object=include_object,
        # documents.entity_id changed type once; keep type changes visible to autogenerate
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL for the migrations without connecting."""
    configure_context(
        url=migration_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    configure_context(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    url = migration_url()
    logger.info(f"Running migrations against {url.rsplit('@', 1)[-1]}")
    connectable = create_async_engine(url, poolclass=pool.NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
