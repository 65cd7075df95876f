from uuid import uuid4
from sqlalchemy import Column, String

from src.models.base import Base
from src.models.custom_types import UUIDType


class CustomersEntity(Base):
    """
    Model for customer records.

    The identity is generated when the instance is created in memory, so a
    freshly built customer already carries the id it will be stored under.
    Callers may pass ``id`` explicitly to describe an existing row, which is
    how detached replacements for ``update`` are built.

    Attributes:
        id (UUID): Primary key, generated with uuid4
        first_name (str): Customer's first name
        last_name (str): Customer's last name
        email (str): Customer's email address
    """
    __tablename__ = "customers"

    id = Column(UUIDType, primary_key=True, default=uuid4)
    first_name = Column(String)
    last_name = Column(String)
    email = Column(String)

    def __init__(self, **kwargs):
        kwargs.setdefault("id", uuid4())
        super().__init__(**kwargs)

    def __repr__(self):
        return f"<Customer {self.id}>"
