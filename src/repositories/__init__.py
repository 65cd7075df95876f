"""
This package contains repository implementations for database operations.

Repositories provide a clean abstraction layer for database access,
implementing the repository pattern to separate business logic from
data access concerns.
"""

from src.repositories.base import AsyncBaseRepository, BaseRepository
from src.repositories.customers import AsyncCustomersRepository, CustomersRepository

__all__ = [
    'BaseRepository',
    'AsyncBaseRepository',
    'CustomersRepository',
    'AsyncCustomersRepository',
]
