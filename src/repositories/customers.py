"""
Repositories for customer records.

These classes bind the generic repositories to the customers persistence
contexts and contracts. They add no behavior of their own; they exist so the
HTTP layer can depend on a customers-specific type.
"""

from typing import TypeVar

from src.contexts.customers import AsyncCustomersDbContext, CustomersDbContext
from src.interfaces.customers import IAsyncCustomersRepository, ICustomersRepository
from src.interfaces.entity import BaseEntity
from src.repositories.base import AsyncBaseRepository, BaseRepository

TEntity = TypeVar('TEntity', bound=BaseEntity)


class CustomersRepository(BaseRepository[TEntity, CustomersDbContext], ICustomersRepository[TEntity]):
    """Blocking repository over ``CustomersDbContext``."""


class AsyncCustomersRepository(
    AsyncBaseRepository[TEntity, AsyncCustomersDbContext], IAsyncCustomersRepository[TEntity]
):
    """Asyncio repository over ``AsyncCustomersDbContext``."""
