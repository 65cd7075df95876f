"""
Alembic migration environment.

Uses a blocking engine for migrations even though the API uses the asyncio
driver at runtime. The URL is handed over through the config attributes when the
application runs the upgrade, and read from settings on the command line.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from src.models import Base
from src.utils.config import get_settings

config = context.config

database_url = config.attributes.get("database_url") or get_settings().DATABASE_URL

# Interpret the config file for Python logging, unless the caller owns logging
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode with a blocking engine."""
    connectable = create_engine(database_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )
        with context.begin_transaction():
            context.run_migrations()
    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
