"""
Storage Engine - deduplicating telemetry store on SQLite

Every public operation runs as a single transaction against the backing
database; SQLite's own locking is the serialization point.
"""

import asyncio
import contextlib
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, NamedTuple

from sqlalchemy import delete, func, literal_column, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from telemetry_store.core.database import (
    SCHEMA_VERSION,
    Base,
    create_store_engine,
    is_memory_location,
)
from telemetry_store.core.errors import AlreadyInitialized, NotInitialized, StorageError
from telemetry_store.core.registry import StoreRegistry, registry as default_registry
from telemetry_store.models.telemetry import TelemetryRecord
from telemetry_store.services.codec import TelemetryCodec, default_codec
from telemetry_store.services.hashing import fingerprint

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Wall-clock time in milliseconds since epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Inserted:
    """A new row was written."""

    row_id: str
    ingest_time: int
    payload_hash: str


@dataclass(frozen=True)
class Duplicate:
    """A row with the same fingerprint already exists; nothing was written."""

    payload_hash: str


InsertOutcome = Inserted | Duplicate


class TimestampedTelemetry(NamedTuple):
    value: Any
    ingest_time: int


class TelemetryStore:
    """
    Handle to one telemetry store.

    Create it with a location (file path or ":memory:"), then `await open()`.
    Every operation before `open()` or after `close()` raises NotInitialized.
    Opening a handle twice, or opening a second handle on a location that is
    already open in this process, raises AlreadyInitialized.
    """

    def __init__(
        self,
        location: str | Path,
        *,
        codec: TelemetryCodec = default_codec,
        clock: Callable[[], int] = now_ms,
        registry: StoreRegistry = default_registry,
    ):
        self.location = str(location)
        self.codec = codec
        self.clock = clock
        self._registry = registry
        self._engine: AsyncEngine | None = None
        # In-memory stores share one connection, so transactions must not interleave
        self._gate = asyncio.Lock() if is_memory_location(location) else contextlib.nullcontext()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<TelemetryStore {self.location} ({state})>"

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    # ==================== LIFECYCLE ====================

    async def open(self) -> "TelemetryStore":
        """Open or create the store, its table, index and layout version."""
        if self._engine is not None:
            raise AlreadyInitialized(f"Store {self.location} is already open")

        self._registry.acquire(self.location, self)
        engine = None
        try:
            engine = create_store_engine(self.location)
            async with engine.begin() as conn:
                version = await self._check_layout_version(conn)
                await conn.run_sync(Base.metadata.create_all)
                if version == 0:
                    await conn.exec_driver_sql(f"PRAGMA user_version = {SCHEMA_VERSION}")
        except BaseException as e:
            self._registry.release(self.location, self)
            if engine is not None:
                await engine.dispose()
            if isinstance(e, (SQLAlchemyError, OSError)):
                raise StorageError(f"Cannot open store at {self.location}: {e}") from e
            raise

        self._engine = engine
        logger.info(f"Telemetry store opened at {self.location}")
        return self

    async def _check_layout_version(self, conn: AsyncConnection) -> int:
        """Current layout version; 0 means a fresh file."""
        version = (await conn.exec_driver_sql("PRAGMA user_version")).scalar()
        if version not in (0, SCHEMA_VERSION):
            raise StorageError(
                f"Store at {self.location} has layout version {version}, expected {SCHEMA_VERSION}"
            )
        return version

    async def close(self) -> None:
        """Release the database. Safe to call more than once."""
        engine = self._engine
        if engine is None:
            return
        self._engine = None
        try:
            await engine.dispose()
        finally:
            self._registry.release(self.location, self)
        logger.info(f"Telemetry store closed at {self.location}")

    async def __aenter__(self) -> "TelemetryStore":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise NotInitialized(f"Store {self.location} is not open. Call open() first.")
        return self._engine

    @contextlib.asynccontextmanager
    async def _transaction(self):
        engine = self._require_engine()
        async with self._gate:
            try:
                async with engine.begin() as conn:
                    yield conn
            except SQLAlchemyError as e:
                raise StorageError(f"Storage failure on {self.location}: {e}") from e

    # ==================== WRITES ====================

    async def insert(self, device_id: str, value: Any, raw_payload: str | None = None) -> InsertOutcome:
        """
        Store one reading unless its payload was stored before.

        Args:
            device_id: Originating device
            value: Telemetry value, encoded through the codec
            raw_payload: Text as received from the device. When given it is
                stored and hashed verbatim instead of the re-encoded value,
                after checking that it decodes.

        Returns:
            Inserted with the new row id and ingest time, or Duplicate.
        """
        self._require_engine()
        if not device_id:
            raise ValueError("device_id must be a non-empty string")

        if raw_payload is None:
            payload = self.codec.encode(value)
        else:
            self.codec.decode(raw_payload)
            payload = raw_payload
        payload_hash = fingerprint(payload)

        mirror = {
            name: column_value
            for name, column_value in self.codec.flatten(value).items()
            if name in TelemetryRecord.MIRROR_COLUMNS
        }
        row_id = str(uuid.uuid4())
        ingest_time = self.clock()

        stmt = (
            sqlite_insert(TelemetryRecord)
            .values(
                row_id=row_id,
                device_id=device_id,
                ingest_time=ingest_time,
                payload=payload,
                payload_hash=payload_hash,
                **mirror,
            )
            .on_conflict_do_nothing(index_elements=["payload_hash"])
        )

        async with self._transaction() as conn:
            written = (await conn.execute(stmt)).rowcount

        if written == 0:
            logger.debug(f"INSERT (DUPLICATE) for {device_id} hash={payload_hash[:12]}")
            return Duplicate(payload_hash=payload_hash)

        logger.debug(f"INSERT OK for {device_id} row={row_id} t={ingest_time}")
        return Inserted(row_id=row_id, ingest_time=ingest_time, payload_hash=payload_hash)

    async def prune_before(self, threshold_ms: int) -> int:
        """Delete every row with ingest_time strictly before threshold_ms."""
        stmt = delete(TelemetryRecord).where(TelemetryRecord.ingest_time < threshold_ms)
        async with self._transaction() as conn:
            removed = (await conn.execute(stmt)).rowcount
        logger.info(f"Pruned {removed} rows older than {threshold_ms}")
        return removed

    async def prune_older_than(self, age: timedelta) -> int:
        """Delete rows ingested more than `age` ago, across all devices."""
        self._require_engine()
        if age < timedelta(0):
            raise ValueError(f"Retention age must not be negative: {age}")
        threshold = self.clock() - age // timedelta(milliseconds=1)
        return await self.prune_before(threshold)

    # ==================== READS ====================

    def _device_rows(self, device_id: str, *columns):
        return (
            select(*columns)
            .where(TelemetryRecord.device_id == device_id)
            # Same millisecond: most recently inserted first
            .order_by(TelemetryRecord.ingest_time.desc(), literal_column("telemetry.rowid").desc())
        )

    async def list_by_device(self, device_id: str) -> list[Any]:
        """All readings for a device, newest first. Empty list when none."""
        stmt = self._device_rows(device_id, TelemetryRecord.payload)
        async with self._transaction() as conn:
            rows = (await conn.execute(stmt)).all()
        return [self.codec.decode(row.payload) for row in rows]

    async def list_by_device_with_timestamp(self, device_id: str) -> list[TimestampedTelemetry]:
        """Like list_by_device, paired with each row's ingest time."""
        stmt = self._device_rows(device_id, TelemetryRecord.payload, TelemetryRecord.ingest_time)
        async with self._transaction() as conn:
            rows = (await conn.execute(stmt)).all()
        return [
            TimestampedTelemetry(self.codec.decode(row.payload), row.ingest_time)
            for row in rows
        ]

    async def count_by_device(self, device_id: str) -> int:
        stmt = select(func.count()).select_from(TelemetryRecord).where(
            TelemetryRecord.device_id == device_id
        )
        async with self._transaction() as conn:
            return (await conn.execute(stmt)).scalar_one()
