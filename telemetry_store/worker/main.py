"""
Telemetry Store - Retention Worker
Keeps the store open and prunes readings past the retention window
"""

import asyncio
import logging
import signal

from telemetry_store.core.config import settings
from telemetry_store.services.lifecycle import store_session
from telemetry_store.services.retention import RetentionScheduler

logger = logging.getLogger(__name__)


async def main():
    """Entry point."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    async with store_session(settings.store_path) as store:
        scheduler = RetentionScheduler(
            store,
            max_age=settings.retention,
            interval=settings.prune_interval_seconds,
        )

        # Handle shutdown signals
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, scheduler.stop)

        logger.info(f"🚀 Retention worker running on {store.location}")
        await scheduler.start()

    logger.info("⏹️ Retention worker stopped")


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
