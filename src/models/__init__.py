"""
This package contains the entity models for the application.
"""

from src.models.base import Base
from src.models.customers import CustomersEntity

__all__ = ['Base', 'CustomersEntity']
