"""Data context: entity sets over an AsyncSession, schema creation, and save.

A context is a unit of work. It owns one ``AsyncSession`` for its lifetime;
entities added, loaded, modified or removed through it are written in a
single transaction when ``save_changes()`` is awaited. Nothing reaches
storage before that: the session never autoflushes, so queries only see
saved rows.

Usage::

    async with factory.create() as context:
        city = City(postal_code_prefix=21)
        context.cities.add(city)
        await context.save_changes()
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass
from types import TracebackType
from typing import Any, ClassVar, Generic, Self, TypeVar, overload

from sqlalchemy import ColumnElement, MetaData, Table, func, inspect, text
from sqlalchemy.exc import IntegrityError, MultipleResultsFound, NoResultFound
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session
from sqlmodel import SQLModel, select
from sqlmodel.sql.expression import SelectOfScalar

from Restaurant_Guide.data.providers import ProviderKind, build_engine, parse_connection_string
from Restaurant_Guide.utils.exceptions import (
    EntityNotFoundError,
    MultipleEntitiesFoundError,
    ReferentialIntegrityError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=SQLModel)
C = TypeVar("C", bound="DataContext")

SCHEMA_ERROR_MESSAGE = "An error occurred creating the DB."


@dataclass(frozen=True)
class ContextOptions:
    """Connection string plus the engine every context built from it shares."""

    connection_string: str
    kind: ProviderKind
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]

    @classmethod
    def from_connection_string(cls, connection_string: str) -> "ContextOptions":
        parsed = parse_connection_string(connection_string)
        engine = build_engine(parsed)
        session_factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
        return cls(connection_string, parsed.kind, engine, session_factory)


# ---------------------------------------------------------------------------
# Entity sets
# ---------------------------------------------------------------------------


class EntitySet(Generic[T]):
    """Query and write handle for one table model within a context."""

    def __init__(self, context: "DataContext", model: type[T]) -> None:
        self._context = context
        self.model = model

    @property
    def name(self) -> str:
        return self.model.__name__

    def select(self, *criteria: ColumnElement[bool]) -> SelectOfScalar[T]:
        """Build a SELECT of this model narrowed by every criterion."""
        statement = select(self.model)
        if criteria:
            statement = statement.where(*criteria)
        return statement

    async def to_list(self) -> list[T]:
        """Fetch every stored entity."""
        return await self.where()

    async def where(self, *criteria: ColumnElement[bool]) -> list[T]:
        """Fetch the entities matching all criteria; empty when none match."""
        result = await self._context.session.scalars(self.select(*criteria))
        return list(result.all())

    async def single(self, *criteria: ColumnElement[bool]) -> T:
        """Fetch the only matching entity.

        Raises:
            EntityNotFoundError: If nothing matches.
            MultipleEntitiesFoundError: If more than one entity matches.
        """
        result = await self._context.session.scalars(self.select(*criteria).limit(2))
        try:
            return result.one()
        except NoResultFound:
            msg = f"No {self.name} matched the query"
            raise EntityNotFoundError(msg, entity=self.name) from None
        except MultipleResultsFound:
            msg = f"More than one {self.name} matched the query"
            raise MultipleEntitiesFoundError(msg, entity=self.name) from None

    async def single_or_default(self, *criteria: ColumnElement[bool]) -> T | None:
        """Like single(), but returns None when nothing matches."""
        result = await self._context.session.scalars(self.select(*criteria).limit(2))
        try:
            return result.one_or_none()
        except MultipleResultsFound:
            msg = f"More than one {self.name} matched the query"
            raise MultipleEntitiesFoundError(msg, entity=self.name) from None

    async def first_or_default(self, *criteria: ColumnElement[bool]) -> T | None:
        result = await self._context.session.scalars(self.select(*criteria).limit(1))
        return result.first()

    async def count(self, *criteria: ColumnElement[bool]) -> int:
        statement = select(func.count()).select_from(self.model)
        if criteria:
            statement = statement.where(*criteria)
        return int(await self._context.session.scalar(statement) or 0)

    async def any(self, *criteria: ColumnElement[bool]) -> bool:
        return await self.first_or_default(*criteria) is not None

    async def find(self, key: Any) -> T | None:
        """Return the entity with primary key ``key``, checking the session first."""
        return await self._context.session.get(self.model, key)

    async def __aiter__(self) -> AsyncIterator[T]:
        for entity in await self.to_list():
            yield entity

    def add(self, entity: T) -> None:
        """Mark ``entity`` for insertion on the next save."""
        self._check_type(entity)
        self._context.session.add(entity)

    def add_range(self, entities: Iterable[T]) -> None:
        for entity in entities:
            self.add(entity)

    async def remove(self, entity: T) -> None:
        """Mark ``entity`` for deletion; a never-saved entity is just forgotten."""
        self._check_type(entity)
        session = self._context.session
        if entity in session.new:
            session.expunge(entity)
        else:
            await session.delete(entity)

    def _check_type(self, entity: SQLModel) -> None:
        if not isinstance(entity, self.model):
            msg = f"Expected {self.name}, got {type(entity).__name__}"
            raise TypeError(msg)


class entity_set(Generic[T]):  # noqa: N801
    """Declare an entity set on a DataContext subclass::

    class GuideContext(DataContext):
        cities = entity_set(City)
    """

    def __init__(self, model: type[T]) -> None:
        self.model = model

    @overload
    def __get__(self, instance: None, owner: type) -> "entity_set[T]": ...

    @overload
    def __get__(self, instance: "DataContext", owner: type) -> EntitySet[T]: ...

    def __get__(self, instance: "DataContext | None", owner: type) -> "entity_set[T] | EntitySet[T]":
        if instance is None:
            return self
        return instance.set_for(self.model)


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class DataContext:
    """Unit of work over one AsyncSession.

    Subclasses declare their entity sets with ``entity_set()`` and may
    override ``on_model_creating()`` to add constraints or indexes to the
    mapped tables before the schema is first created.
    """

    _customized: ClassVar[set[type]] = set()

    def __init__(self, options: ContextOptions) -> None:
        self.options = options
        self._session: AsyncSession | None = None
        self._sets: dict[type[SQLModel], EntitySet[Any]] = {}

    # ------------------------------------------------------------------
    # Model
    # ------------------------------------------------------------------

    @classmethod
    def declared_models(cls) -> dict[str, type[SQLModel]]:
        """Attribute name -> table model for every ``entity_set`` on the class."""
        found: dict[str, type[SQLModel]] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, entity_set):
                    found[name] = value.model
        return found

    def on_model_creating(self, metadata: MetaData) -> None:
        """Override to customize the mapped tables; runs once per context class."""

    @property
    def tables(self) -> list[Table]:
        """The tables of the declared models, customized on first access."""
        cls = type(self)
        if cls not in DataContext._customized:
            self.on_model_creating(SQLModel.metadata)
            DataContext._customized.add(cls)
            logger.debug("Model customized for %s", cls.__name__)
        return [
            SQLModel.metadata.tables[str(model.__tablename__)]
            for model in cls.declared_models().values()
        ]

    def set_for(self, model: type[T]) -> EntitySet[T]:
        """Return the entity set for ``model``."""
        existing = self._sets.get(model)
        if existing is None:
            existing = EntitySet(self, model)
            self._sets[model] = existing
        return existing

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    @property
    def session(self) -> AsyncSession:
        """Return the active session or raise if not connected."""
        if self._session is None:
            msg = "Context is not connected. Call open() or use 'async with'."
            raise RuntimeError(msg)
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session is not None

    async def open(self) -> None:
        if self._session is None:
            self._session = self.options.session_factory()
            logger.debug("%s opened", type(self).__name__)

    async def close(self) -> None:
        """Close the session, discarding any unsaved changes."""
        if self._session is None:
            return
        if self.has_changes():
            logger.warning("%s closed with unsaved changes discarded", type(self).__name__)
        await self._session.close()
        self._session = None
        logger.debug("%s closed", type(self).__name__)

    async def __aenter__(self) -> Self:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    async def ensure_created(self) -> bool:
        """Create any missing tables and their indexes.

        Running it against an existing schema is a no-op. Returns True only
        when at least one table was created.
        """
        tables = self.tables

        def create(sync_session: Session) -> list[str]:
            connection = sync_session.connection()
            existing = set(inspect(connection).get_table_names())
            SQLModel.metadata.create_all(connection, tables=tables)
            return [table.name for table in tables if table.name not in existing]

        created = await self.session.run_sync(create)
        await self.session.commit()
        for name in created:
            logger.info("Created table %s", name)
        if not created:
            logger.debug("Schema already exists, nothing created")
        return bool(created)

    async def ensure_deleted(self) -> bool:
        """Drop every mapped table. Returns True if any table existed."""
        tables = self.tables

        def drop(sync_session: Session) -> list[str]:
            connection = sync_session.connection()
            existing = set(inspect(connection).get_table_names())
            SQLModel.metadata.drop_all(connection, tables=tables)
            return [table.name for table in tables if table.name in existing]

        self.session.expunge_all()
        dropped = await self.session.run_sync(drop)
        await self.session.commit()
        for name in dropped:
            logger.info("Dropped table %s", name)
        return bool(dropped)

    async def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        return await self.session.scalar(text("SELECT 1")) == 1

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def has_changes(self) -> bool:
        return self._pending_count() > 0

    def _pending_count(self) -> int:
        session = self.session
        modified = sum(1 for entity in session.dirty if session.is_modified(entity))
        return len(session.new) + modified + len(session.deleted)

    async def save_changes(self, *, timeout: float | None = None) -> int:
        """Write all pending changes in one transaction.

        Generated keys, and keys copied from saved parents into foreign key
        fields, are written back to the entities. On any failure, including
        cancellation or ``timeout``, the transaction is rolled back and the
        pending changes are discarded.

        Returns:
            Number of entities inserted, updated or deleted.

        Raises:
            ReferentialIntegrityError: If the engine rejects a write.
            TimeoutError: If ``timeout`` seconds elapse first.
        """
        session = self.session
        pending = self._pending_count()
        if not pending:
            return 0
        try:
            async with asyncio.timeout(timeout):
                await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            logger.warning("Save rolled back: %s", exc.orig)
            raise ReferentialIntegrityError(f"Save rejected by storage: {exc.orig}") from exc
        except (Exception, asyncio.CancelledError):
            await session.rollback()
            logger.warning("Save rolled back; pending changes discarded")
            raise

        logger.info("Saved %d change(s)", pending)
        return pending


# ---------------------------------------------------------------------------
# Registration helpers
# ---------------------------------------------------------------------------


class ContextFactory(Generic[C]):
    """Creates scoped contexts of one type sharing one engine."""

    def __init__(self, context_type: type[C], options: ContextOptions) -> None:
        self.context_type = context_type
        self.options = options

    def create(self) -> C:
        """Return a new, unopened context; use it with ``async with``."""
        return self.context_type(self.options)

    async def dispose(self) -> None:
        await self.options.engine.dispose()


async def initialize_database(
    factory: ContextFactory[Any], log: logging.Logger | None = None
) -> bool:
    """Ensure the schema exists, logging and swallowing any failure.

    Startup continues when this fails; the application then runs against
    whatever schema is present. Returns True when the schema is in place.
    """
    log = log or logger
    try:
        async with factory.create() as context:
            await context.ensure_created()
    except Exception:
        log.exception(SCHEMA_ERROR_MESSAGE)
        return False
    return True
