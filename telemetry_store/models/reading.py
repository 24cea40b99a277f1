"""
KitTelemetry - one reading reported by a hydroponic kit
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class KitTelemetry(BaseModel):
    """Sensor readings and actuator states as sent by the kit (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int | None = None

    # Sensors
    ppm: float | None = None
    ph: float | None = None
    temp_c: float | None = Field(default=None, alias="tempC")
    humidity: float | None = None  # %
    water_temp: float | None = Field(default=None, alias="waterTemp")
    water_level: float | None = Field(default=None, alias="waterLevel")

    # Actuators
    ph_reducer: bool = Field(default=False, alias="pH_reducer")
    add_water: bool = False
    nutrients_adder: bool = False
    humidifier: bool = False
    ex_fan: bool = False
    is_default: bool = Field(default=False, alias="isDefault")

    def mirror_columns(self) -> dict[str, Any]:
        """Scalar projection stored next to the payload for ad-hoc queries."""
        return {
            "reading_id": self.id,
            "ppm": self.ppm,
            "ph": self.ph,
            "temp_c": self.temp_c,
            "humidity": self.humidity,
            "water_temp": self.water_temp,
            "water_level": self.water_level,
            "ph_reducer": self.ph_reducer,
            "add_water": self.add_water,
            "nutrients_adder": self.nutrients_adder,
            "humidifier": self.humidifier,
            "ex_fan": self.ex_fan,
            "is_default": self.is_default,
        }
