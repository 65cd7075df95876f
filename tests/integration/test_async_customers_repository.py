"""
Integration tests for the asyncio customers repository.
"""

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from src.contexts.customers import AsyncCustomersDbContext
from src.models.customers import CustomersEntity
from src.repositories.customers import AsyncCustomersRepository


@pytest_asyncio.fixture
async def other_repository(async_session_factory):
    """A second repository with its own unit of work, to observe commits."""
    context = AsyncCustomersDbContext(async_session_factory)
    yield AsyncCustomersRepository(context, CustomersEntity)
    await context.close()


async def _stored(repository, customer_id):
    rows = await repository.fetch_all(
        repository.as_no_tracking().where(CustomersEntity.id == customer_id)
    )
    return rows[0] if rows else None


@pytest.mark.asyncio
async def test_add_then_get_all(async_repository, other_repository, make_customer):
    customer = make_customer()

    await async_repository.add(customer)

    assert [c.id for c in await async_repository.get_all()] == [customer.id]
    assert [c.id for c in await other_repository.get_all()] == [customer.id]


@pytest.mark.asyncio
async def test_add_range_and_compose(async_repository, make_customer):
    await async_repository.add_range([
        make_customer(first_name="Ada"),
        make_customer(first_name="Grace"),
        make_customer(first_name="Alan"),
    ])

    statement = (
        async_repository.as_queryable()
        .where(CustomersEntity.first_name.like("A%"))
        .order_by(CustomersEntity.first_name)
    )
    customers = await async_repository.fetch_all(statement)

    assert [c.first_name for c in customers] == ["Ada", "Alan"]


@pytest.mark.asyncio
async def test_update_tracked_entity(async_repository, other_repository, make_customer):
    customer = make_customer()
    await async_repository.add(customer)

    customer.email = "changed@example.com"
    await async_repository.update(customer)

    assert (await _stored(other_repository, customer.id)).email == "changed@example.com"


@pytest.mark.asyncio
async def test_update_with_replacement(async_repository, async_db_context, make_customer):
    old = make_customer()
    await async_repository.add(old)
    new = CustomersEntity(id=old.id, first_name="New", last_name=old.last_name, email=old.email)

    await async_repository.update(old, new)

    assert old not in async_db_context.session
    assert (await _stored(async_repository, old.id)).first_name == "New"


@pytest.mark.asyncio
async def test_update_missing_row_raises(async_repository):
    with pytest.raises(StaleDataError):
        await async_repository.update(CustomersEntity(first_name="Ghost"))

    assert await async_repository.fetch_all(async_repository.as_no_tracking()) == []


@pytest.mark.asyncio
async def test_update_range(async_repository, other_repository, make_customer):
    customers = [make_customer() for _ in range(3)]
    await async_repository.add_range(customers)

    for customer in customers:
        customer.last_name = "Updated"
    await async_repository.update_range(customers)

    assert {c.last_name for c in await other_repository.get_all()} == {"Updated"}


@pytest.mark.asyncio
async def test_delete_and_delete_range(async_repository, make_customer):
    customers = [make_customer() for _ in range(4)]
    await async_repository.add_range(customers)

    await async_repository.delete(customers[0])
    await async_repository.delete_range(customers[1:3])

    remaining = await async_repository.fetch_all(async_repository.as_no_tracking())
    assert [c.id for c in remaining] == [customers[3].id]


@pytest.mark.asyncio
async def test_delete_detached_entity(async_repository, other_repository, make_customer):
    customer = make_customer()
    await async_repository.add(customer)

    await other_repository.delete(CustomersEntity(id=customer.id))

    assert await _stored(async_repository, customer.id) is None


@pytest.mark.asyncio
async def test_truncate(async_repository, make_customer):
    await async_repository.add_range([make_customer() for _ in range(3)])

    await async_repository.truncate()

    assert await async_repository.get_all() == []


@pytest.mark.asyncio
async def test_no_tracking_snapshot_is_isolated(async_repository, async_db_context, make_customer):
    customer = make_customer(first_name="Ada")
    await async_repository.add(customer)

    snapshot = await _stored(async_repository, customer.id)
    customer.first_name = "Changed"
    await async_repository.update(customer)

    assert snapshot is not customer
    assert snapshot not in async_db_context.session
    assert snapshot.first_name == "Ada"
    assert (await _stored(async_repository, customer.id)).first_name == "Changed"


@pytest.mark.asyncio
async def test_duplicate_id_raises_and_repository_recovers(async_repository, other_repository, make_customer):
    customer = make_customer()
    await async_repository.add(customer)

    with pytest.raises(IntegrityError):
        await other_repository.add(CustomersEntity(id=customer.id))

    await other_repository.add(make_customer())
    assert len(await other_repository.get_all()) == 2


@pytest.mark.asyncio
async def test_lazy_loading_toggle(async_repository, async_db_context, make_customer):
    await async_repository.add(make_customer())

    async_repository.use_as_lazy_loading_proxies(False)

    assert async_db_context.lazy_loading_enabled is False
    assert len(await async_repository.get_all()) == 1


@pytest.mark.asyncio
async def test_task_cancelled_before_start_stores_nothing(async_repository, other_repository, make_customer):
    """A cancelled task raises CancelledError and never reaches the database."""
    task = asyncio.ensure_future(async_repository.add(make_customer()))
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert await other_repository.get_all() == []


@pytest.mark.asyncio
async def test_delete_missing_row_raises(async_repository):
    with pytest.raises(StaleDataError):
        await async_repository.delete(CustomersEntity(first_name="Ghost"))


@pytest.mark.asyncio
async def test_delete_row_removed_elsewhere_raises(async_repository, other_repository, make_customer):
    customer = make_customer()
    await async_repository.add(customer)
    await other_repository.delete(CustomersEntity(id=customer.id))

    with pytest.raises(StaleDataError):
        await async_repository.delete(customer)

    await async_repository.add(make_customer())
    assert len(await other_repository.get_all()) == 1


@pytest.mark.asyncio
async def test_delete_range_with_missing_row_deletes_nothing(async_repository, make_customer):
    customers = [make_customer() for _ in range(2)]
    await async_repository.add_range(customers)

    with pytest.raises(StaleDataError):
        await async_repository.delete_range([customers[0], CustomersEntity(first_name="Ghost")])

    remaining = await async_repository.fetch_all(async_repository.as_no_tracking())
    assert {c.id for c in remaining} == {c.id for c in customers}


@pytest.mark.asyncio
async def test_ensure_created_is_idempotent(async_db_context):
    await async_db_context.ensure_created()
    await async_db_context.ensure_created()
