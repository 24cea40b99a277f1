"""
Best-effort ingestion - record readings without ever crashing the caller
"""

import logging
from typing import Any

from telemetry_store.core.errors import StoreError
from telemetry_store.services.storage import Duplicate, InsertOutcome, TelemetryStore

logger = logging.getLogger(__name__)


async def record_telemetry(
    store: TelemetryStore,
    device_id: str,
    value: Any,
    raw_payload: str | None = None,
) -> InsertOutcome | None:
    """
    Save a reading, logging the outcome.

    Returns the insert outcome, or None if the store failed (the error is
    logged, not raised: telemetry ingestion is best-effort). Invalid
    input such as an empty device id is treated the same way.
    """
    try:
        outcome = await store.insert(device_id, value, raw_payload=raw_payload)
    except (StoreError, ValueError) as e:
        logger.error(f"INSERT ERROR for {device_id}: {e}")
        return None

    status = "DUPLICATE" if isinstance(outcome, Duplicate) else "OK"
    logger.info(f"INSERT {status} for {device_id}")

    if logger.isEnabledFor(logging.DEBUG):
        try:
            count = await store.count_by_device(device_id)
            logger.debug(f"Current rows for {device_id}: {count}")
        except StoreError as e:
            logger.debug(f"Could not count rows for {device_id}: {e}")

    return outcome
