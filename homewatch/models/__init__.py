"""SQLAlchemy models."""

from homewatch.models.item import Item
from homewatch.models.measurement import Measurement
from homewatch.models.sensor_reading import SensorReading

__all__ = [
    "Item",
    "Measurement",
    "SensorReading",
]
