"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures and configuration for all tests. Every
test gets its own SQLite file under ``tmp_path`` so blocking and asyncio
engines can share the same tables.
"""

import sys
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add the project root directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.contexts.customers import AsyncCustomersDbContext, CustomersDbContext  # noqa: E402
from src.main import create_app  # noqa: E402
from src.models.base import Base  # noqa: E402
from src.models.customers import CustomersEntity  # noqa: E402
from src.repositories.customers import AsyncCustomersRepository, CustomersRepository  # noqa: E402
from src.utils.config import get_settings  # noqa: E402
from src.utils.database import (  # noqa: E402
    get_async_db_context,
    get_async_engine,
    get_async_session_factory,
    get_async_session_local,
    get_engine,
    get_session_factory,
    get_session_local,
)


@pytest.fixture
def database_url(tmp_path) -> str:
    """Blocking URL of a throwaway SQLite database."""
    return f"sqlite:///{tmp_path / 'customers.db'}"


@pytest.fixture
def engine(database_url):
    """Create the test engine and the customers table."""
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return get_session_local(engine)


@pytest.fixture
def db_context(session_factory):
    """Create a blocking customers context."""
    context = CustomersDbContext(session_factory)
    yield context
    context.close()


@pytest.fixture
def repository(db_context):
    """Create a blocking customers repository."""
    return CustomersRepository(db_context, CustomersEntity)


@pytest.fixture
def async_engine(engine, database_url):
    """Asyncio engine over the same database file; tables come from ``engine``."""
    async_engine = get_async_engine(database_url)
    yield async_engine
    # NullPool keeps nothing open, so the blocking dispose is enough
    async_engine.sync_engine.dispose()


@pytest.fixture
def async_session_factory(async_engine):
    return get_async_session_local(async_engine)


@pytest_asyncio.fixture
async def async_db_context(async_session_factory):
    """Create an asyncio customers context."""
    context = AsyncCustomersDbContext(async_session_factory)
    yield context
    await context.close()


@pytest.fixture
def async_repository(async_db_context):
    """Create an asyncio customers repository."""
    return AsyncCustomersRepository(async_db_context, CustomersEntity)


@pytest.fixture
def make_customer():
    """Build unsaved customers with distinct emails."""
    counter = {"n": 0}

    def _make(first_name: str = "Ada", last_name: str = "Lovelace", email: str = None) -> CustomersEntity:
        counter["n"] += 1
        return CustomersEntity(
            first_name=first_name,
            last_name=last_name,
            email=email or f"customer{counter['n']}@example.com"
        )

    return _make


@pytest.fixture
def reset_caches():
    """Clear cached settings and session factories around a test."""
    get_settings.cache_clear()
    get_session_factory.cache_clear()
    get_async_session_factory.cache_clear()
    yield
    get_settings.cache_clear()
    get_session_factory.cache_clear()
    get_async_session_factory.cache_clear()


@pytest.fixture
def app(async_session_factory):
    """Create the application with contexts bound to the test database."""
    app = create_app()

    async def override_get_async_db_context():
        context = AsyncCustomersDbContext(async_session_factory)
        try:
            yield context
        finally:
            await context.close()

    app.dependency_overrides[get_async_db_context] = override_get_async_db_context
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Test client without the startup hook; tables already exist."""
    return TestClient(app)
