"""
Base repository pattern implementation for database operations.

This module provides generic repositories that satisfy the repository
contracts for any mapped entity and persistence context pair. Each operation
is a direct pass-through to the context plus one log line naming the entity
type; every mutating operation commits before returning.
"""

import logging
from typing import Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy.orm import Query
from sqlalchemy.sql import Select

from src.contexts.base import AsyncDbContext, DbContext
from src.interfaces.entity import BaseEntity
from src.interfaces.repository import IAsyncBaseRepository, IBaseRepository
from src.utils.logger import get_logger

# Type variables for the entity and its context
TEntity = TypeVar('TEntity', bound=BaseEntity)
TContext = TypeVar('TContext', bound=DbContext)
TAsyncContext = TypeVar('TAsyncContext', bound=AsyncDbContext)


class BaseRepository(IBaseRepository[TEntity], Generic[TEntity, TContext]):
    """
    Generic blocking repository.

    Attributes:
        context (TContext): Persistence context owning the unit of work
        model (Type[TEntity]): Mapped entity class
        logger (logging.Logger): Diagnostic logger
    """

    def __init__(self, context: TContext, model: Type[TEntity], logger: Optional[logging.Logger] = None):
        """
        Initialize the repository with a persistence context and entity class.

        Args:
            context (TContext): Persistence context for this unit of work
            model (Type[TEntity]): Mapped entity class
            logger (logging.Logger, optional): Logger for per-call diagnostics
        """
        self.context = context
        self.model = model
        self.logger = logger or get_logger(__name__)

    @property
    def _name(self) -> str:
        return self.model.__name__

    def use_as_lazy_loading_proxies(self, use_as_lazy_loading_proxies: bool) -> None:
        self.context.lazy_loading_enabled = use_as_lazy_loading_proxies

    def as_queryable(self) -> Query:
        self.logger.info("Retrieving queryable for '%s'.", self._name)
        return self.context.set(self.model)

    def as_no_tracking(self) -> Query:
        self.logger.info("Retrieving no-tracking queryable for '%s'.", self._name)
        return self.context.set_no_tracking(self.model)

    def get_all(self) -> List[TEntity]:
        self.logger.info("Retrieving all records from '%s'.", self._name)
        return self.context.set(self.model).all()

    def add(self, entity: TEntity) -> None:
        self.logger.info("Adding record to '%s'.", self._name)
        self.context.add(entity)
        self.context.save_changes()

    def add_range(self, entities: Iterable[TEntity]) -> None:
        self.logger.info("Adding range records to '%s'.", self._name)
        self.context.add_range(entities)
        self.context.save_changes()

    def update(self, entity: TEntity, new_entity: Optional[TEntity] = None) -> None:
        if new_entity is not None:
            self.logger.info("Updating old record from '%s'.", self._name)
            self.context.detach(entity)
            entity = new_entity
        else:
            self.logger.info("Updating record from '%s'.", self._name)
        self.context.update(entity)
        self.context.save_changes()

    def update_range(self, entities: Iterable[TEntity]) -> None:
        self.logger.info("Updating range records from '%s'.", self._name)
        for entity in entities:
            self.context.update(entity)
        self.context.save_changes()

    def delete(self, entity: TEntity) -> None:
        self.logger.info("Deleting record from '%s'.", self._name)
        self.context.remove(entity)
        self.context.save_changes()

    def delete_range(self, entities: Iterable[TEntity]) -> None:
        self.logger.info("Deleting range records from '%s'.", self._name)
        self.context.remove_range(entities)
        self.context.save_changes()

    def truncate(self) -> None:
        self.logger.info("Truncating '%s'.", self._name)
        self.context.remove_all(self.model)
        self.context.save_changes()


class AsyncBaseRepository(IAsyncBaseRepository[TEntity], Generic[TEntity, TAsyncContext]):
    """
    Generic asyncio repository.

    Mirrors ``BaseRepository`` with coroutines. Composable views are
    ``Select`` statements executed through ``fetch_all``.
    """

    def __init__(self, context: TAsyncContext, model: Type[TEntity], logger: Optional[logging.Logger] = None):
        self.context = context
        self.model = model
        self.logger = logger or get_logger(__name__)

    @property
    def _name(self) -> str:
        return self.model.__name__

    def use_as_lazy_loading_proxies(self, use_as_lazy_loading_proxies: bool) -> None:
        self.context.lazy_loading_enabled = use_as_lazy_loading_proxies

    def as_queryable(self) -> Select:
        self.logger.info("Retrieving queryable for '%s'.", self._name)
        return self.context.set(self.model)

    def as_no_tracking(self) -> Select:
        self.logger.info("Retrieving no-tracking queryable for '%s'.", self._name)
        return self.context.set_no_tracking(self.model)

    async def fetch_all(self, statement: Select) -> List[TEntity]:
        self.logger.info("Retrieving records from '%s'.", self._name)
        return await self.context.scalars(statement)

    async def get_all(self) -> List[TEntity]:
        self.logger.info("Retrieving all records from '%s'.", self._name)
        return await self.context.scalars(self.context.set(self.model))

    async def add(self, entity: TEntity) -> None:
        self.logger.info("Adding record to '%s'.", self._name)
        self.context.add(entity)
        await self.context.save_changes()

    async def add_range(self, entities: Iterable[TEntity]) -> None:
        self.logger.info("Adding range records to '%s'.", self._name)
        self.context.add_range(entities)
        await self.context.save_changes()

    async def update(self, entity: TEntity, new_entity: Optional[TEntity] = None) -> None:
        if new_entity is not None:
            self.logger.info("Updating old record from '%s'.", self._name)
            self.context.detach(entity)
            entity = new_entity
        else:
            self.logger.info("Updating record from '%s'.", self._name)
        self.context.update(entity)
        await self.context.save_changes()

    async def update_range(self, entities: Iterable[TEntity]) -> None:
        self.logger.info("Updating range records from '%s'.", self._name)
        for entity in entities:
            self.context.update(entity)
        await self.context.save_changes()

    async def delete(self, entity: TEntity) -> None:
        self.logger.info("Deleting record from '%s'.", self._name)
        await self.context.remove(entity)
        await self.context.save_changes()

    async def delete_range(self, entities: Iterable[TEntity]) -> None:
        self.logger.info("Deleting range records from '%s'.", self._name)
        await self.context.remove_range(entities)
        await self.context.save_changes()

    async def truncate(self) -> None:
        self.logger.info("Truncating '%s'.", self._name)
        await self.context.remove_all(self.model)
        await self.context.save_changes()
