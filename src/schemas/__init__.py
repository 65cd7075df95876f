"""
This package contains Pydantic models for request/response validation.
"""

from src.schemas.customers import CustomerResponse

__all__ = ['CustomerResponse']
