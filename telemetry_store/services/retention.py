"""
Retention Scheduler - prunes old readings periodically
Runs as a background task next to ingestion
"""

import asyncio
import logging
from datetime import timedelta

from telemetry_store.core.errors import StoreError
from telemetry_store.services.storage import TelemetryStore

logger = logging.getLogger(__name__)


class RetentionScheduler:
    """Deletes readings older than `max_age` every `interval` seconds."""

    def __init__(self, store: TelemetryStore, max_age: timedelta, interval: float = 3600):
        if interval <= 0:
            raise ValueError(f"Prune interval must be positive: {interval}")
        self.store = store
        self.max_age = max_age
        self.interval = interval
        self.running = False
        self._wakeup = asyncio.Event()

    async def run_once(self) -> int:
        """Prune once. Returns the number of rows removed."""
        removed = await self.store.prune_older_than(self.max_age)
        if removed:
            logger.info(f"🧹 Retention removed {removed} rows older than {self.max_age}")
        return removed

    async def start(self):
        """Start the retention loop."""
        # A stop() issued before start() stays in effect
        self.running = not self._wakeup.is_set()
        logger.info(f"🧹 Retention scheduler started (max age {self.max_age}, every {self.interval}s)")

        while self.running and not self._wakeup.is_set():
            try:
                await self.run_once()
            except StoreError as e:
                logger.error(f"Retention error: {e}")

            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

        logger.info("🧹 Retention scheduler stopped")

    def stop(self):
        """Stop the scheduler."""
        self.running = False
        self._wakeup.set()
