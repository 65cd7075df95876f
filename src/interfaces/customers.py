"""
Repository contracts for customer records.
"""

from typing import TypeVar

from src.interfaces.entity import BaseEntity
from src.interfaces.repository import IAsyncBaseRepository, IBaseRepository

TEntity = TypeVar('TEntity', bound=BaseEntity)


class ICustomersRepository(IBaseRepository[TEntity]):
    """Blocking repository contract for the customers store."""


class IAsyncCustomersRepository(IAsyncBaseRepository[TEntity]):
    """Asyncio repository contract for the customers store."""
