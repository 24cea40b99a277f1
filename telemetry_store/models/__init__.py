# Database models and value types
from telemetry_store.models.reading import KitTelemetry
from telemetry_store.models.telemetry import TelemetryRecord

__all__ = ["KitTelemetry", "TelemetryRecord"]
