"""
Telemetry Store - Error types
"""


class StoreError(Exception):
    """Base class for all telemetry store errors."""


class NotInitialized(StoreError):
    """Operation attempted on a store that is not open."""


class AlreadyInitialized(StoreError):
    """Store handle or location is already open."""


class StorageError(StoreError):
    """Backing database failed (I/O, locking, corruption, bad layout)."""


class CodecError(StoreError):
    """Telemetry value could not be encoded, or a payload could not be decoded."""
