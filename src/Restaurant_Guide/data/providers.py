"""Storage engines selected by connection string.

Two interchangeable SQLite variants are supported, both driven by aiosqlite
through SQLAlchemy's asyncio engine:

* ``sqlite:///data/restaurants.db`` or ``Data Source=data/restaurants.db``
  opens a file-backed database with WAL mode and foreign key enforcement.
* ``memory://guide`` or ``Data Source=:memory:`` opens an in-memory
  database held on a single pooled connection, so every context created
  from the same engine sees the same data until the engine is disposed.

Switching between them is a configuration change, never a code change.
"""

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from Restaurant_Guide.utils.exceptions import UnsupportedProviderError

logger = logging.getLogger(__name__)

_DATA_SOURCE_KEY = "data source"
_DEFAULT_MEMORY_NAME = "restaurant_guide"


class ProviderKind(enum.StrEnum):
    """Storage engine variant named by a connection string."""

    SQLITE = "sqlite"
    MEMORY = "memory"


@dataclass(frozen=True)
class ConnectionOptions:
    """Parsed connection string."""

    kind: ProviderKind
    database: str


def parse_connection_string(value: str) -> ConnectionOptions:
    """Parse a URL-style or ``key=value;`` connection string.

    Raises:
        UnsupportedProviderError: If the scheme or keys name no known provider.
    """
    text = value.strip()
    if text.startswith("sqlite:///"):
        path = text.removeprefix("sqlite:///")
        if not path:
            raise UnsupportedProviderError(f"Missing database path in '{value}'")
        if path == ":memory:":
            return ConnectionOptions(ProviderKind.MEMORY, _DEFAULT_MEMORY_NAME)
        return ConnectionOptions(ProviderKind.SQLITE, path)
    if text.startswith("memory://"):
        name = text.removeprefix("memory://") or _DEFAULT_MEMORY_NAME
        return ConnectionOptions(ProviderKind.MEMORY, name)
    if "=" in text:
        pairs = dict(
            (key.strip().lower(), val.strip())
            for key, _, val in (part.partition("=") for part in text.split(";") if part.strip())
        )
        source = pairs.get(_DATA_SOURCE_KEY)
        if source:
            if source == ":memory:":
                return ConnectionOptions(ProviderKind.MEMORY, _DEFAULT_MEMORY_NAME)
            return ConnectionOptions(ProviderKind.SQLITE, source)
    raise UnsupportedProviderError(f"Unsupported connection string: '{value}'")


def build_engine(options: ConnectionOptions) -> AsyncEngine:
    """Create the async engine for ``options`` with foreign keys enforced.

    No connection is opened here; a file database's directory is created on
    the first connect, so an unusable path surfaces from the first query.
    """
    if options.kind is ProviderKind.MEMORY:
        # one connection for the engine's lifetime; the database dies with it
        engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
        pragmas: tuple[str, ...] = ("PRAGMA foreign_keys=ON",)
    else:
        path = Path(options.database)
        engine = create_async_engine(f"sqlite+aiosqlite:///{path}")
        pragmas = ("PRAGMA journal_mode=WAL", "PRAGMA foreign_keys=ON")

        @event.listens_for(engine.sync_engine, "do_connect")
        def _ensure_directory(dialect: Any, conn_rec: Any, cargs: Any, cparams: Any) -> None:
            path.parent.mkdir(parents=True, exist_ok=True)

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        for pragma in pragmas:
            cursor.execute(pragma)
        cursor.close()

    logger.info("Using %s storage provider (%s)", options.kind.value, options.database)
    return engine
