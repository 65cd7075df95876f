"""
Contracts shared by the persistence layer.

The entity contract describes the only shape the generic repositories rely
on, and the repository contracts describe the CRUD surface every repository
exposes, in a blocking and an asyncio flavour.
"""

from src.interfaces.entity import BaseEntity
from src.interfaces.repository import IBaseRepository, IAsyncBaseRepository
from src.interfaces.customers import ICustomersRepository, IAsyncCustomersRepository

__all__ = [
    'BaseEntity',
    'IBaseRepository',
    'IAsyncBaseRepository',
    'ICustomersRepository',
    'IAsyncCustomersRepository',
]
