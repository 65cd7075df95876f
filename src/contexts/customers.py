"""
Persistence contexts for the customers store.

The column mapping of ``CustomersEntity`` (table name, generated identity)
lives on the declarative model; these contexts register the entity so
repositories can request query sets for it.
"""

from src.contexts.base import AsyncDbContext, DbContext
from src.models.customers import CustomersEntity


class CustomersDbContext(DbContext):
    """Blocking unit of work over the customers tables."""

    entities = (CustomersEntity,)


class AsyncCustomersDbContext(AsyncDbContext):
    """Asyncio unit of work over the customers tables."""

    entities = (CustomersEntity,)
