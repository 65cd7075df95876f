"""
Integration tests for the lazy-loading toggle.

Customers have no relationships, so these tests register a small owner/pet
model on their own contexts, sharing the test database file.
"""

import pytest
import pytest_asyncio
from sqlalchemy import Column, ForeignKey, Integer, String, inspect
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, relationship

from src.contexts.base import AsyncDbContext, DbContext
from src.repositories.base import AsyncBaseRepository, BaseRepository


class PetsBase(AsyncAttrs, DeclarativeBase):
    pass


class Owner(PetsBase):
    __tablename__ = "owners"

    id = Column(Integer, primary_key=True)
    name = Column(String)
    pets = relationship("Pet", back_populates="owner", order_by="Pet.id")


class Pet(PetsBase):
    __tablename__ = "pets"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"))
    owner = relationship(Owner, back_populates="pets")


class PetsDbContext(DbContext):
    entities = (Owner, Pet)
    metadata = PetsBase.metadata


class AsyncPetsDbContext(AsyncDbContext):
    entities = (Owner, Pet)
    metadata = PetsBase.metadata


def _owner_with_pets():
    return Owner(id=1, name="Ada", pets=[Pet(id=1), Pet(id=2)])


@pytest.fixture
def pets_context(session_factory):
    context = PetsDbContext(session_factory)
    context.ensure_created()
    yield context
    context.close()


@pytest.fixture
def owners(pets_context):
    """Owner repository with one stored owner and an empty identity map."""
    repository = BaseRepository(pets_context, Owner)
    repository.add(_owner_with_pets())
    pets_context.session.expunge_all()
    return repository


def test_relationships_load_on_access_by_default(owners):
    owner = owners.as_queryable().filter_by(id=1).one()

    assert "pets" not in inspect(owner).dict
    assert [pet.id for pet in owner.pets] == [1, 2]


def test_relationships_stay_empty_when_disabled(owners):
    owners.use_as_lazy_loading_proxies(False)

    owner = owners.as_queryable().filter_by(id=1).one()

    assert owner.pets == []


def test_no_tracking_reads_follow_toggle(owners):
    owners.use_as_lazy_loading_proxies(False)

    assert owners.as_no_tracking().filter_by(id=1).one().pets == []


def test_relationships_load_again_after_reenabling(owners, pets_context):
    owners.use_as_lazy_loading_proxies(False)
    assert owners.as_queryable().filter_by(id=1).one().pets == []
    pets_context.session.expunge_all()

    owners.use_as_lazy_loading_proxies(True)
    owner = owners.as_queryable().filter_by(id=1).one()

    assert "pets" not in inspect(owner).dict
    assert [pet.id for pet in owner.pets] == [1, 2]


@pytest_asyncio.fixture
async def async_pets_context(async_session_factory):
    context = AsyncPetsDbContext(async_session_factory)
    await context.ensure_created()
    yield context
    await context.close()


@pytest_asyncio.fixture
async def async_owners(async_pets_context):
    repository = AsyncBaseRepository(async_pets_context, Owner)
    await repository.add(_owner_with_pets())
    async_pets_context.session.expunge_all()
    return repository


async def _load_owner(repository):
    [owner] = await repository.fetch_all(repository.as_queryable().where(Owner.id == 1))
    return owner


@pytest.mark.asyncio
async def test_async_relationships_stay_empty_when_disabled(async_owners):
    async_owners.use_as_lazy_loading_proxies(False)

    owner = await _load_owner(async_owners)

    assert owner.pets == []


@pytest.mark.asyncio
async def test_async_relationships_load_again_after_reenabling(async_owners, async_pets_context):
    async_owners.use_as_lazy_loading_proxies(False)
    assert (await _load_owner(async_owners)).pets == []
    async_pets_context.session.expunge_all()

    async_owners.use_as_lazy_loading_proxies(True)
    owner = await _load_owner(async_owners)

    assert "pets" not in inspect(owner).dict
    assert [pet.id for pet in await owner.awaitable_attrs.pets] == [1, 2]
