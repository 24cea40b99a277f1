"""
Lifecycle Manager - open each store location once per process, close deterministically
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from telemetry_store.core.config import settings
from telemetry_store.core.registry import registry
from telemetry_store.services.storage import TelemetryStore

logger = logging.getLogger(__name__)


async def open_store(location: str | Path | None = None, **options) -> TelemetryStore:
    """
    Open the store at `location` (default: settings.store_path).

    Raises AlreadyInitialized if the location is already open in this process.
    Extra keyword options (codec, clock) are passed to TelemetryStore.
    """
    store = TelemetryStore(location or settings.store_path, **options)
    return await store.open()


def get_store(location: str | Path | None = None) -> TelemetryStore:
    """Active handle for `location`. Raises NotInitialized if it was never opened."""
    return registry.get(str(location or settings.store_path))


@asynccontextmanager
async def store_session(location: str | Path | None = None, **options) -> AsyncIterator[TelemetryStore]:
    """Open a store for the duration of the block and always close it."""
    store = await open_store(location, **options)
    try:
        yield store
    finally:
        await store.close()


async def close_all() -> int:
    """Close every store still open in this process. Returns how many were closed."""
    stores = registry.active()
    for store in stores:
        await store.close()
    if stores:
        logger.info(f"Closed {len(stores)} telemetry store(s)")
    return len(stores)
