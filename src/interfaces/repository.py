"""
Base repository contracts.

These abstract classes define the CRUD surface every repository exposes for
one entity type. ``IBaseRepository`` is the blocking flavour used with a
regular SQLAlchemy ``Session``; ``IAsyncBaseRepository`` mirrors it with
coroutines for ``AsyncSession``. Every mutating operation commits its unit
of work before returning.
"""

from abc import ABC, abstractmethod
from typing import Generic, Iterable, List, Optional, TypeVar

from sqlalchemy.orm import Query
from sqlalchemy.sql import Select

from src.interfaces.entity import BaseEntity

TEntity = TypeVar('TEntity', bound=BaseEntity)


class IBaseRepository(ABC, Generic[TEntity]):
    """Blocking repository contract."""

    @abstractmethod
    def use_as_lazy_loading_proxies(self, use_as_lazy_loading_proxies: bool) -> None:
        """Enable or disable lazy loading of related entities.

        When disabled, relationship attributes are left unpopulated instead
        of being loaded on first access. The setting applies to every query
        built after the call.

        Args:
            use_as_lazy_loading_proxies: True to load relationships lazily
        """
        pass

    @abstractmethod
    def as_queryable(self) -> Query:
        """Get a lazily evaluated, composable query over all entities.

        Returns:
            Query: Tracked query; results belong to the unit of work
        """
        pass

    @abstractmethod
    def as_no_tracking(self) -> Query:
        """Get a lazily evaluated query whose results are not tracked.

        Returns:
            Query: Query served by a separate reader session
        """
        pass

    @abstractmethod
    def get_all(self) -> List[TEntity]:
        """Get every entity currently stored.

        Returns:
            List[TEntity]: All entities, unpaginated
        """
        pass

    @abstractmethod
    def add(self, entity: TEntity) -> None:
        """Insert a new entity and commit.

        Args:
            entity: The entity to add
        """
        pass

    @abstractmethod
    def add_range(self, entities: Iterable[TEntity]) -> None:
        """Insert several entities in one commit.

        Args:
            entities: The entities to add
        """
        pass

    @abstractmethod
    def update(self, entity: TEntity, new_entity: Optional[TEntity] = None) -> None:
        """Replace the stored state of an entity and commit.

        With a single argument the row matching ``entity.id`` is overwritten
        with the entity's values. With two arguments ``entity`` is the old,
        possibly tracked instance: it is detached first so that ``new_entity``
        can take its place in the unit of work.

        Args:
            entity: The entity to update, or the old entity
            new_entity: Optional replacement carrying the updated values
        """
        pass

    @abstractmethod
    def update_range(self, entities: Iterable[TEntity]) -> None:
        """Update several entities in one commit.

        Args:
            entities: The entities to update
        """
        pass

    @abstractmethod
    def delete(self, entity: TEntity) -> None:
        """Delete an entity and commit.

        Args:
            entity: The entity to delete
        """
        pass

    @abstractmethod
    def delete_range(self, entities: Iterable[TEntity]) -> None:
        """Delete several entities in one commit.

        Args:
            entities: The entities to delete
        """
        pass

    @abstractmethod
    def truncate(self) -> None:
        """Delete every entity of the type in a single statement."""
        pass


class IAsyncBaseRepository(ABC, Generic[TEntity]):
    """Asyncio repository contract.

    Operations are coroutines; cancelling the awaiting task cancels the
    in-flight database call.
    """

    @abstractmethod
    def use_as_lazy_loading_proxies(self, use_as_lazy_loading_proxies: bool) -> None:
        """Enable or disable lazy loading of related entities."""
        pass

    @abstractmethod
    def as_queryable(self) -> Select:
        """Get a composable ``SELECT`` over all entities.

        Returns:
            Select: Statement to refine and pass to ``fetch_all``
        """
        pass

    @abstractmethod
    def as_no_tracking(self) -> Select:
        """Get a composable ``SELECT`` whose results are not tracked.

        Returns:
            Select: Statement to refine and pass to ``fetch_all``
        """
        pass

    @abstractmethod
    async def fetch_all(self, statement: Select) -> List[TEntity]:
        """Execute a statement built from ``as_queryable``/``as_no_tracking``.

        Args:
            statement: The statement to execute

        Returns:
            List[TEntity]: Matching entities
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[TEntity]:
        """Get every entity currently stored."""
        pass

    @abstractmethod
    async def add(self, entity: TEntity) -> None:
        """Insert a new entity and commit."""
        pass

    @abstractmethod
    async def add_range(self, entities: Iterable[TEntity]) -> None:
        """Insert several entities in one commit."""
        pass

    @abstractmethod
    async def update(self, entity: TEntity, new_entity: Optional[TEntity] = None) -> None:
        """Replace the stored state of an entity and commit.

        See ``IBaseRepository.update`` for the two-argument form.
        """
        pass

    @abstractmethod
    async def update_range(self, entities: Iterable[TEntity]) -> None:
        """Update several entities in one commit."""
        pass

    @abstractmethod
    async def delete(self, entity: TEntity) -> None:
        """Delete an entity and commit."""
        pass

    @abstractmethod
    async def delete_range(self, entities: Iterable[TEntity]) -> None:
        """Delete several entities in one commit."""
        pass

    @abstractmethod
    async def truncate(self) -> None:
        """Delete every entity of the type in a single statement."""
        pass
