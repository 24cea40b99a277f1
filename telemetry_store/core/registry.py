"""
Telemetry Store - Process-wide registry of open store locations
"""

import threading
from typing import Any

from telemetry_store.core.database import MEMORY_LOCATION, normalize_location
from telemetry_store.core.errors import AlreadyInitialized, NotInitialized


class StoreRegistry:
    """At most one open handle per store location within a process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._handles: dict[str, Any] = {}

    def acquire(self, location: str, handle: Any) -> None:
        """Claim a location for a handle. In-memory locations are never shared."""
        key = normalize_location(location)
        if key == MEMORY_LOCATION:
            return
        with self._lock:
            current = self._handles.get(key)
            if current is not None:
                raise AlreadyInitialized(f"Store already open at {key}")
            self._handles[key] = handle

    def release(self, location: str, handle: Any) -> None:
        key = normalize_location(location)
        with self._lock:
            if self._handles.get(key) is handle:
                del self._handles[key]

    def get(self, location: str) -> Any:
        key = normalize_location(location)
        with self._lock:
            handle = self._handles.get(key)
        if handle is None:
            raise NotInitialized(f"No store open at {key}. Call open_store() first.")
        return handle

    def active(self) -> list[Any]:
        with self._lock:
            return list(self._handles.values())

    def __contains__(self, location: str) -> bool:
        with self._lock:
            return normalize_location(location) in self._handles


# Global registry shared by every TelemetryStore in the process
registry = StoreRegistry()
