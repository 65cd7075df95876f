"""
Base model configuration for SQLAlchemy ORM.

This module defines the base declarative class that all entity classes
inherit from. Its metadata is what the persistence contexts create and what
the Alembic environment compares migrations against.

Usage:
    from src.models.base import Base

    class MyEntity(Base):
        __tablename__ = "my_table"

        id = Column(UUIDType, primary_key=True, default=uuid4)
        name = Column(String)
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
