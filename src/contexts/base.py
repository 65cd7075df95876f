"""
Persistence contexts wrapping SQLAlchemy sessions.

A context owns one unit of work (a ``Session`` or ``AsyncSession``) and
declares which mapped entity classes it serves. Repositories never touch the
session directly: they ask the context for query sets and hand it entities
to add, update or remove, then call ``save_changes``.

Queries obtained through ``set_no_tracking`` run in a separate reader session,
so the instances they return never join the unit of work and are not touched
by later changes made through tracked instances.

Removing a stored entity issues a ``DELETE`` for its primary key right away
and raises ``StaleDataError`` when no row matched, the same error a stale
``UPDATE`` raises at commit.
"""

import logging
from typing import Iterable, Optional, Tuple, Type

from sqlalchemy import delete, inspect, select
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Query, Session, make_transient_to_detached, noload, object_session, sessionmaker
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.sql import Select

from src.models.base import Base
from src.utils.logger import get_logger

# Execution option marking a statement as a no-tracking read
NO_TRACKING = "no_tracking"


def _flag_columns_modified(entity) -> None:
    """Mark every loaded, non-key column of ``entity`` as changed."""
    state = inspect(entity)
    for prop in state.mapper.column_attrs:
        if prop.key not in state.dict:
            continue
        if any(getattr(column, "primary_key", False) for column in prop.columns):
            continue
        flag_modified(entity, prop.key)


class _ContextMixin:
    """Entity registration and lazy-loading bookkeeping shared by both contexts."""

    entities: Tuple[Type, ...] = ()
    metadata = Base.metadata

    lazy_loading_enabled: bool
    logger: logging.Logger

    def _check_entity(self, model: Type) -> None:
        if model not in self.entities:
            raise InvalidRequestError(
                f"{model.__name__} is not mapped by {type(self).__name__}"
            )

    def _loader_options(self) -> list:
        # Relationships keep their mapped strategy unless lazy loading is off
        return [] if self.lazy_loading_enabled else [noload("*")]

    def _tables(self) -> list:
        return [entity.__table__ for entity in self.entities]

    def _delete_row(self, entity):
        """Build a ``DELETE`` matching the primary key of ``entity``."""
        mapper = inspect(entity).mapper
        key = mapper.primary_key_from_instance(entity)
        return delete(mapper.class_).where(
            *[column == value for column, value in zip(mapper.primary_key, key)]
        ).execution_options(synchronize_session=False)

    def _check_deleted(self, entity, rowcount: int) -> None:
        if rowcount != 1:
            raise StaleDataError(
                f"DELETE statement on table '{entity.__table__.name}' expected to delete "
                f"1 row(s); {rowcount} were matched."
            )

    @staticmethod
    def _forget(session: Session, entity) -> None:
        """Drop every instance holding the identity of a deleted ``entity``."""
        tracked = session.identity_map.get(inspect(entity).mapper.identity_key_from_instance(entity))
        for instance in (entity, tracked):
            if instance is not None and instance in session:
                session.expunge(instance)


class DbContext(_ContextMixin):
    """
    Blocking persistence context over a SQLAlchemy ``Session``.

    Subclasses list the entity classes they serve in ``entities``.

    Attributes:
        session (Session): The unit of work
        lazy_loading_enabled (bool): Whether relationships load on access
    """

    def __init__(self, session_factory: sessionmaker, logger: Optional[logging.Logger] = None):
        """
        Open the unit of work.

        Args:
            session_factory (sessionmaker): Factory for the tracked session and
                for the no-tracking reader session
            logger (logging.Logger, optional): Logger for commit diagnostics
        """
        self._session_factory = session_factory
        self.session: Session = session_factory()
        self._reader: Optional[Session] = None
        self.lazy_loading_enabled = True
        self.logger = logger or get_logger(__name__)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def set(self, model: Type) -> Query:
        """Get a tracked query over ``model``."""
        self._check_entity(model)
        return self.session.query(model).options(*self._loader_options())

    def set_no_tracking(self, model: Type) -> Query:
        """
        Get a query over ``model`` served by the reader session.

        The reader is closed before each new query, which releases its
        connection and detaches the results of the previous one. Those keep
        the values they were loaded with.
        """
        self._check_entity(model)
        if self._reader is None:
            self._reader = self._session_factory(autoflush=False)
        else:
            self._reader.close()
        return self._reader.query(model).options(*self._loader_options())

    def _attach(self, entity) -> None:
        owner = object_session(entity)
        if owner is not None and owner is not self.session:
            owner.expunge(entity)
        state = inspect(entity)
        if state.transient:
            # Treat a freshly built instance as a handle on an existing row
            make_transient_to_detached(entity)
        if state.detached:
            self.session.add(entity)

    def add(self, entity) -> None:
        self._check_entity(type(entity))
        self.session.add(entity)

    def add_range(self, entities: Iterable) -> None:
        for entity in entities:
            self.add(entity)

    def update(self, entity) -> None:
        """Attach ``entity`` as an existing row and mark its columns changed."""
        self._check_entity(type(entity))
        self._attach(entity)
        _flag_columns_modified(entity)

    def detach(self, entity) -> None:
        if entity in self.session:
            self.session.expunge(entity)

    def remove(self, entity) -> None:
        """
        Delete the stored row of ``entity``; an unsaved entity is just dropped.

        Raises:
            StaleDataError: No row matched the entity's primary key. The unit
                of work is rolled back.
        """
        self._check_entity(type(entity))
        if inspect(entity).pending:
            self.session.expunge(entity)
            return
        try:
            result = self.session.execute(self._delete_row(entity))
            self._check_deleted(entity, result.rowcount)
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self._forget(self.session, entity)

    def remove_range(self, entities: Iterable) -> None:
        for entity in entities:
            self.remove(entity)

    def remove_all(self, model: Type) -> None:
        """Queue a single ``DELETE`` of every ``model`` row."""
        self._check_entity(model)
        self.session.execute(
            delete(model).execution_options(synchronize_session="fetch")
        )

    def save_changes(self) -> None:
        """
        Commit the unit of work.

        On failure the session is rolled back and the SQLAlchemy error is
        re-raised unchanged.
        """
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.logger.debug("Commit failed, rolling back %s", type(self).__name__)
            self.session.rollback()
            raise

    def ensure_created(self) -> None:
        """Create the tables of this context's entities if they are missing."""
        self.metadata.create_all(bind=self.session.get_bind(), tables=self._tables())

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        self.session.close()


class AsyncDbContext(_ContextMixin):
    """
    Asyncio persistence context over a SQLAlchemy ``AsyncSession``.

    Query sets are ``Select`` statements; execute them with ``scalars``.
    Statements built by ``set_no_tracking`` carry the ``no_tracking``
    execution option and run in a short-lived reader session whose instances
    come back detached.
    """

    def __init__(self, session_factory: async_sessionmaker, logger: Optional[logging.Logger] = None):
        self._session_factory = session_factory
        self.session: AsyncSession = session_factory()
        self.lazy_loading_enabled = True
        self.logger = logger or get_logger(__name__)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def set(self, model: Type) -> Select:
        self._check_entity(model)
        return select(model).options(*self._loader_options())

    def set_no_tracking(self, model: Type) -> Select:
        return self.set(model).execution_options(**{NO_TRACKING: True})

    async def scalars(self, statement: Select) -> list:
        """Execute ``statement`` and return its entities as a list."""
        if statement.get_execution_options().get(NO_TRACKING):
            async with self._session_factory(autoflush=False) as reader:
                result = await reader.scalars(statement)
                return list(result.all())
        result = await self.session.scalars(statement)
        return list(result.all())

    def _attach(self, entity) -> None:
        owner = object_session(entity)
        if owner is not None and owner is not self.session.sync_session:
            owner.expunge(entity)
        state = inspect(entity)
        if state.transient:
            make_transient_to_detached(entity)
        if state.detached:
            self.session.add(entity)

    def add(self, entity) -> None:
        self._check_entity(type(entity))
        self.session.add(entity)

    def add_range(self, entities: Iterable) -> None:
        for entity in entities:
            self.add(entity)

    def update(self, entity) -> None:
        self._check_entity(type(entity))
        self._attach(entity)
        _flag_columns_modified(entity)

    def detach(self, entity) -> None:
        if entity in self.session:
            self.session.expunge(entity)

    async def remove(self, entity) -> None:
        self._check_entity(type(entity))
        if inspect(entity).pending:
            self.session.expunge(entity)
            return
        try:
            result = await self.session.execute(self._delete_row(entity))
            self._check_deleted(entity, result.rowcount)
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        self._forget(self.session.sync_session, entity)

    async def remove_range(self, entities: Iterable) -> None:
        for entity in entities:
            await self.remove(entity)

    async def remove_all(self, model: Type) -> None:
        self._check_entity(model)
        await self.session.execute(
            delete(model).execution_options(synchronize_session="fetch")
        )

    async def save_changes(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError:
            self.logger.debug("Commit failed, rolling back %s", type(self).__name__)
            await self.session.rollback()
            raise

    async def ensure_created(self) -> None:
        async with self.session.bind.begin() as conn:
            await conn.run_sync(self.metadata.create_all, tables=self._tables())

    async def close(self) -> None:
        await self.session.close()
