"""Sensor reading model (flat time series of device capabilities)."""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from homewatch.database import Base


class SensorReading(Base):
    """A single (device, capability, value, timestamp) fact.

    Rows are never updated; corrections are written as new rows. ``value``
    holds the JSON-serialized scalar.
    """

    __tablename__ = "sensor_readings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[str] = mapped_column(String(100), nullable=False)
    device_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    capability: Mapped[str] = mapped_column(String(32), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    zone_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    __table_args__ = (
        Index("ix_sensor_readings_time", "recorded_at", "id"),
        Index(
            "ix_sensor_readings_device_capability_time", "device_id", "capability", "recorded_at"
        ),
    )
