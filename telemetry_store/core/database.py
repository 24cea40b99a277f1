"""
Telemetry Store - Database Configuration
Async SQLAlchemy with SQLite (aiosqlite)
"""

from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from telemetry_store.core.config import settings

MEMORY_LOCATION = ":memory:"

# Single versioned layout, stored in PRAGMA user_version
SCHEMA_VERSION = 1


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def is_memory_location(location: str | Path) -> bool:
    return str(location) == MEMORY_LOCATION


def normalize_location(location: str | Path) -> str:
    """Resolve a store location to the key used for process-wide bookkeeping."""
    if is_memory_location(location):
        return MEMORY_LOCATION
    return str(Path(location).expanduser().resolve())


def build_database_url(location: str | Path) -> str:
    if is_memory_location(location):
        return "sqlite+aiosqlite://"
    return f"sqlite+aiosqlite:///{normalize_location(location)}"


def create_store_engine(location: str | Path) -> AsyncEngine:
    """
    Create an async engine for one store location.

    In-memory stores keep a single shared connection, otherwise every
    connection from the pool would see its own empty database.
    """
    url = build_database_url(location)

    if is_memory_location(location):
        return create_async_engine(
            url,
            echo=settings.sql_echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    Path(normalize_location(location)).parent.mkdir(parents=True, exist_ok=True)
    engine = create_async_engine(
        url,
        echo=settings.sql_echo,
        connect_args={"timeout": settings.busy_timeout_seconds},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={int(settings.busy_timeout_seconds * 1000)}")
        cursor.close()

    return engine
