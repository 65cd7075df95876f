"""
Router for customer endpoints.

This module handles API routes for:
- Listing all customers
- Creating a customer from scalar fields
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, Query

from src.contexts.customers import AsyncCustomersDbContext
from src.interfaces.customers import IAsyncCustomersRepository
from src.models.customers import CustomersEntity
from src.repositories.customers import AsyncCustomersRepository
from src.schemas.customers import CustomerResponse
from src.utils.database import get_async_db_context

router = APIRouter(
    prefix="/customers",
    tags=["customers"]
)

logger = logging.getLogger(__name__)


def get_customers_repository(
    context: AsyncCustomersDbContext = Depends(get_async_db_context)
) -> IAsyncCustomersRepository[CustomersEntity]:
    """Get a customers repository bound to the request's context."""
    return AsyncCustomersRepository(context, CustomersEntity, logger=logger)


@router.get("/getCustomers", response_model=List[CustomerResponse])
async def get_customers(
    repository: IAsyncCustomersRepository[CustomersEntity] = Depends(get_customers_repository)
):
    """List every customer"""
    return await repository.get_all()


@router.post("/createCustomers", response_model=CustomerResponse)
async def create_customers(
    first_name: str = Query(..., alias="firstName"),
    last_name: str = Query(..., alias="lastName"),
    email: str = Query(...),
    repository: IAsyncCustomersRepository[CustomersEntity] = Depends(get_customers_repository)
):
    """Create a customer; its id is generated on construction"""
    customer = CustomersEntity(
        first_name=first_name,
        last_name=last_name,
        email=email
    )
    await repository.add(customer)
    return customer
