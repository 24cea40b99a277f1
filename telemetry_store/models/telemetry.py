"""
Telemetry model - deduplicated readings from devices
"""

from sqlalchemy import BigInteger, Boolean, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from telemetry_store.core.database import Base


class TelemetryRecord(Base):
    """One stored reading. Immutable once written."""

    __tablename__ = "telemetry"

    row_id: Mapped[str] = mapped_column(String(36), primary_key=True)  # uuid4
    device_id: Mapped[str] = mapped_column(String, nullable=False)
    ingest_time: Mapped[int] = mapped_column(BigInteger, nullable=False)  # ms since epoch

    # Canonical serialized value, source of truth for reads
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    # Unique across the whole table, not per device
    payload_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    # Mirror columns: write-time projection of the payload, never read back
    reading_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ppm: Mapped[float | None] = mapped_column(Float, nullable=True)
    ph: Mapped[float | None] = mapped_column(Float, nullable=True)
    temp_c: Mapped[float | None] = mapped_column(Float, nullable=True)
    humidity: Mapped[float | None] = mapped_column(Float, nullable=True)
    water_temp: Mapped[float | None] = mapped_column(Float, nullable=True)
    water_level: Mapped[float | None] = mapped_column(Float, nullable=True)

    ph_reducer: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    add_water: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    nutrients_adder: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    humidifier: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    ex_fan: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_default: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    __table_args__ = (
        Index("ix_telemetry_device_time", "device_id", "ingest_time"),
    )

    MIRROR_COLUMNS = (
        "reading_id", "ppm", "ph", "temp_c", "humidity", "water_temp", "water_level",
        "ph_reducer", "add_water", "nutrients_adder", "humidifier", "ex_fan", "is_default",
    )

    def __repr__(self) -> str:
        return f"<TelemetryRecord device={self.device_id} t={self.ingest_time} hash={self.payload_hash[:8]}>"
