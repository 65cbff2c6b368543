"""Pydantic schemas for sensor readings and capability statistics."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from homewatch.capabilities import Capability, coerce_value
from homewatch.schemas.common import Scalar, UtcDateTime

# --- Write Schemas ---


class ReadingCreate(BaseModel):
    """A normalized reading ready to be persisted."""

    model_config = ConfigDict(populate_by_name=True)

    device_id: str = Field(alias="deviceId")
    device_name: str | None = Field(default=None, alias="deviceName")
    capability: Capability
    value: Scalar
    zone_name: str | None = Field(default=None, alias="zoneName")
    # None lets the database assign the insert time
    recorded_at: UtcDateTime | None = Field(default=None, alias="recordedAt")

    @model_validator(mode="after")
    def check_value_kind(self) -> "ReadingCreate":
        self.value = coerce_value(self.capability, self.value)
        return self


class DeviceSnapshot(BaseModel):
    """Current capability values of one device."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str | None = None
    zone_name: str | None = Field(default=None, alias="zoneName")
    capabilities: dict[str, Scalar | None] = Field(default_factory=dict)


class MeasurementCreate(BaseModel):
    """A capability value of a managed item."""

    item_id: str
    capability: Capability
    value: Scalar
    recorded_at: UtcDateTime

    @model_validator(mode="after")
    def check_value_kind(self) -> "MeasurementCreate":
        self.value = coerce_value(self.capability, self.value)
        return self


class WriteResult(BaseModel):
    written: int


class DeleteResult(BaseModel):
    deleted: int


# --- Read Schemas ---


class ReadingOut(BaseModel):
    """A persisted reading with its value deserialized."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    device_id: str = Field(serialization_alias="deviceId")
    device_name: str | None = Field(serialization_alias="deviceName")
    capability: str
    value: Any
    zone_name: str | None = Field(serialization_alias="zoneName")
    recorded_at: UtcDateTime = Field(serialization_alias="recordedAt")


class StatPoint(BaseModel):
    value: Any
    timestamp: UtcDateTime


class CapabilityStats(BaseModel):
    """Windowed statistics for one device capability.

    min/max/avg are None when the window holds no numeric values.
    """

    model_config = ConfigDict(populate_by_name=True)

    device_id: str = Field(serialization_alias="deviceId")
    capability: str
    window_days: int = Field(serialization_alias="windowDays")
    count: int
    min: float | None = None
    max: float | None = None
    avg: float | None = None
    data: list[StatPoint]
