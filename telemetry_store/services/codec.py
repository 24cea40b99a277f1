"""
Record Codec - canonical JSON form of telemetry values

The store hashes and persists whatever `encode` returns and rebuilds values
with `decode`; it never looks inside a value except through `flatten`.
"""

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from telemetry_store.core.errors import CodecError
from telemetry_store.models.reading import KitTelemetry


def canonical_json(data: Any) -> str:
    """Deterministic JSON text: sorted keys, no whitespace, UTF-8 kept as is."""
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


class TelemetryCodec:
    """Codec for a pydantic telemetry model."""

    def __init__(self, model: type[BaseModel] = KitTelemetry):
        self.model = model

    def encode(self, value: BaseModel) -> str:
        if not isinstance(value, self.model):
            raise CodecError(
                f"Expected {self.model.__name__}, got {type(value).__name__}"
            )
        try:
            return canonical_json(value.model_dump(mode="json", by_alias=True))
        except ValueError as e:
            # NaN / Infinity have no JSON form
            raise CodecError(f"Cannot encode {self.model.__name__}: {e}") from e

    def decode(self, payload: str | bytes) -> BaseModel:
        try:
            return self.model.model_validate_json(payload)
        except ValidationError as e:
            raise CodecError(f"Payload does not decode to {self.model.__name__}: {e}") from e

    def flatten(self, value: BaseModel) -> dict[str, Any]:
        """Mirror-column projection supplied by the value type, if it has one."""
        mirror = getattr(value, "mirror_columns", None)
        if mirror is None:
            return {}
        return dict(mirror())


default_codec = TelemetryCodec()
