"""
Database configuration and session management for the customers service.

This module provides:
- Database URL resolution (blocking URL and its asyncio twin)
- Engine and session factory builders
- FastAPI dependencies yielding one persistence context per request
- Alembic migration application at startup
- Engine disposal at shutdown
"""

from functools import lru_cache
from pathlib import Path
from typing import AsyncGenerator, Generator, Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from src.contexts.customers import AsyncCustomersDbContext, CustomersDbContext
from src.utils.config import get_settings
from src.utils.logger import get_logger

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ALEMBIC_INI = PROJECT_ROOT / "alembic.ini"
ALEMBIC_SCRIPTS = PROJECT_ROOT / "alembic"

# Blocking driver prefix -> asyncio driver prefix
ASYNC_DRIVERS = {
    "sqlite://": "sqlite+aiosqlite://",
    "sqlite+pysqlite://": "sqlite+aiosqlite://",
}


def get_database_url() -> str:
    """
    Get the blocking database URL from settings.

    Returns:
        str: Database connection URL
    """
    # Fix potential newline issues in .env file
    return get_settings().DATABASE_URL.split('\n')[0].strip()


def to_async_url(database_url: str) -> str:
    """
    Convert a blocking database URL into its asyncio driver form.

    URLs that already name an asyncio driver are returned unchanged.

    Args:
        database_url (str): Blocking database URL

    Returns:
        str: URL for ``create_async_engine``
    """
    for prefix, async_prefix in ASYNC_DRIVERS.items():
        if database_url.startswith(prefix):
            return async_prefix + database_url[len(prefix):]
    return database_url


def _engine_args(database_url: str) -> dict:
    engine_args = {"echo": get_settings().DEBUG}
    if database_url.startswith("sqlite"):
        # Contexts are used from the threadpool and the event loop
        engine_args["connect_args"] = {"check_same_thread": False}
        engine_args["poolclass"] = NullPool
    else:
        engine_args["pool_pre_ping"] = True
    return engine_args


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Get a blocking SQLAlchemy engine.

    Args:
        database_url (str, optional): Database URL. If None, taken from settings.

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    if database_url is None:
        database_url = get_database_url()
    return create_engine(database_url, **_engine_args(database_url))


def get_async_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Get an asyncio SQLAlchemy engine.

    Args:
        database_url (str, optional): Blocking or asyncio database URL.
            If None, taken from settings.

    Returns:
        AsyncEngine: Configured asyncio engine
    """
    database_url = to_async_url(database_url or get_database_url())
    return create_async_engine(database_url, **_engine_args(database_url))


def get_session_local(engine: Optional[Engine] = None) -> sessionmaker:
    """
    Get a blocking session factory.

    Args:
        engine (Engine, optional): SQLAlchemy engine. If None, a new engine is created.

    Returns:
        sessionmaker: Configured session factory
    """
    if engine is None:
        engine = get_engine()
    return sessionmaker(
        bind=engine,
        class_=Session,
        autoflush=False,
        expire_on_commit=False
    )


def get_async_session_local(engine: Optional[AsyncEngine] = None) -> async_sessionmaker:
    """
    Get an asyncio session factory.

    Args:
        engine (AsyncEngine, optional): Asyncio engine. If None, a new engine is created.

    Returns:
        async_sessionmaker: Configured session factory
    """
    if engine is None:
        engine = get_async_engine()
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False
    )


@lru_cache()
def get_session_factory() -> sessionmaker:
    """Get the process-wide blocking session factory."""
    return get_session_local()


@lru_cache()
def get_async_session_factory() -> async_sessionmaker:
    """Get the process-wide asyncio session factory."""
    return get_async_session_local()


def get_db_context() -> Generator[CustomersDbContext, None, None]:
    """
    FastAPI dependency that provides a blocking customers context.

    Yields:
        CustomersDbContext: Context scoped to the current request
    """
    context = CustomersDbContext(get_session_factory())
    try:
        yield context
    finally:
        context.close()


async def get_async_db_context() -> AsyncGenerator[AsyncCustomersDbContext, None]:
    """
    FastAPI dependency that provides an asyncio customers context.

    Yields:
        AsyncCustomersDbContext: Context scoped to the current request
    """
    context = AsyncCustomersDbContext(get_async_session_factory())
    try:
        yield context
    finally:
        await context.close()


def get_alembic_config(database_url: Optional[str] = None) -> Config:
    """
    Build the Alembic configuration for this project.

    Args:
        database_url (str, optional): Blocking database URL to migrate.
            If None, taken from settings.

    Returns:
        Config: Alembic configuration pointing at the project's scripts
    """
    config = Config(str(ALEMBIC_INI))
    config.set_main_option("script_location", str(ALEMBIC_SCRIPTS))
    config.attributes["database_url"] = database_url or get_database_url()
    # Keep the application's logging configuration intact
    config.attributes["configure_logger"] = False
    return config


def run_migrations(database_url: Optional[str] = None, revision: str = "head") -> None:
    """
    Apply Alembic migrations up to ``revision``.

    Args:
        database_url (str, optional): Blocking database URL to migrate
        revision (str): Target revision
    """
    logger.info(f"Applying database migrations up to {revision}")
    command.upgrade(get_alembic_config(database_url), revision)
    logger.info("Database migrations applied")


async def close_db() -> None:
    """
    Dispose the process-wide engines.

    This function should be called during application shutdown.
    """
    if get_async_session_factory.cache_info().currsize:
        await get_async_session_factory().kw["bind"].dispose()
        get_async_session_factory.cache_clear()
    if get_session_factory.cache_info().currsize:
        get_session_factory().kw["bind"].dispose()
        get_session_factory.cache_clear()
    logger.info("Closed database connections")
