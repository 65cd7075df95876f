"""
Persistence contexts: units of work and the entity sets they serve.
"""

from src.contexts.base import AsyncDbContext, DbContext
from src.contexts.customers import AsyncCustomersDbContext, CustomersDbContext

__all__ = ['DbContext', 'AsyncDbContext', 'CustomersDbContext', 'AsyncCustomersDbContext']
