"""
Tests for the telemetry codec.
"""

import json

import pytest
from pydantic import BaseModel

from telemetry_store.core.errors import CodecError
from telemetry_store.models.reading import KitTelemetry
from telemetry_store.services.codec import TelemetryCodec, canonical_json


class TestCanonicalForm:
    """Tests for the canonical JSON encoding."""

    def test_round_trip(self, reading_a, reading_b):
        """Test that decode(encode(v)) == v."""
        codec = TelemetryCodec()
        for reading in (reading_a, reading_b, KitTelemetry()):
            assert codec.decode(codec.encode(reading)) == reading

    def test_keys_sorted_and_compact(self, reading_a):
        encoded = TelemetryCodec().encode(reading_a)

        assert " " not in encoded
        keys = list(json.loads(encoded).keys())
        assert keys == sorted(keys)

    def test_uses_wire_names(self, reading_a):
        """Test that payloads keep the kit's camelCase field names."""
        data = json.loads(TelemetryCodec().encode(reading_a))

        assert data["tempC"] == 23.5
        assert data["waterTemp"] == 20.25
        assert data["pH_reducer"] is False
        assert data["isDefault"] is False
        assert "temp_c" not in data

    def test_field_name_and_alias_encode_identically(self):
        codec = TelemetryCodec()
        by_alias = KitTelemetry(tempC=21.0, isDefault=True)
        by_name = KitTelemetry(temp_c=21.0, is_default=True)

        assert codec.encode(by_alias) == codec.encode(by_name)

    def test_canonical_json_independent_of_key_order(self):
        assert canonical_json({"b": 1, "a": 2}) == canonical_json({"a": 2, "b": 1})


class TestCodecErrors:
    """Tests for codec failures."""

    def test_decode_invalid_json(self):
        with pytest.raises(CodecError):
            TelemetryCodec().decode("{not json")

    def test_decode_wrong_field_type(self):
        with pytest.raises(CodecError):
            TelemetryCodec().decode('{"ppm": "lots"}')

    def test_encode_wrong_value_type(self):
        with pytest.raises(CodecError):
            TelemetryCodec().encode({"ppm": 800})

    def test_encode_nan(self):
        """Test that NaN readings are rejected, JSON has no form for them."""
        with pytest.raises(CodecError):
            TelemetryCodec().encode(KitTelemetry(ppm=float("nan")))


class TestFlatten:
    """Tests for the mirror-column projection."""

    def test_flatten_kit_reading(self, reading_a):
        columns = TelemetryCodec().flatten(reading_a)

        assert columns["reading_id"] == 1
        assert columns["ppm"] == 812.0
        assert columns["temp_c"] == 23.5
        assert columns["add_water"] is True
        assert columns["ex_fan"] is False

    def test_flatten_model_without_projection(self):
        class Bare(BaseModel):
            value: int

        codec = TelemetryCodec(Bare)
        assert codec.flatten(Bare(value=3)) == {}
        assert codec.decode(codec.encode(Bare(value=3))) == Bare(value=3)
