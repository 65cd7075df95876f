"""
Custom SQLAlchemy column types.

SQLite has no UUID column type, so entity identities are stored as their
canonical 36 character string form there and as native UUIDs on PostgreSQL.
Values always come back out of the database as ``uuid.UUID`` instances, which
keeps identity comparisons stable no matter which dialect produced the row.
"""

import uuid

from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.types import String, TypeDecorator


class UUIDType(TypeDecorator):
    """
    Platform-independent UUID type used for entity identities.

    Usage:
        ```python
        from src.models.custom_types import UUIDType

        class MyEntity(Base):
            __tablename__ = "my_table"

            id = Column(UUIDType, primary_key=True, default=uuid4)
        ```
    """

    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(UUID())
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        """Coerce strings and UUIDs to the dialect's storage form."""
        if value is None:
            return value
        if not isinstance(value, uuid.UUID):
            # Validates the format before it reaches the database
            value = uuid.UUID(str(value))
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)
