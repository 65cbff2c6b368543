"""Pydantic schemas for API request/response models."""

from homewatch.schemas.bridge import (
    BridgeConfig,
    LightState,
    LightStateValues,
    Room,
    SensorState,
    SwitchState,
)
from homewatch.schemas.dashboard import (
    DashboardResponse,
    DeviceSummary,
    SystemStatus,
    TimelineEntry,
)
from homewatch.schemas.readings import (
    CapabilityStats,
    DeleteResult,
    DeviceSnapshot,
    MeasurementCreate,
    ReadingCreate,
    ReadingOut,
    StatPoint,
    WriteResult,
)

__all__ = [
    # Bridge schemas
    "BridgeConfig",
    "LightState",
    "LightStateValues",
    "Room",
    "SensorState",
    "SwitchState",
    # Reading schemas
    "CapabilityStats",
    "DeleteResult",
    "DeviceSnapshot",
    "MeasurementCreate",
    "ReadingCreate",
    "ReadingOut",
    "StatPoint",
    "WriteResult",
    # Dashboard schemas
    "DashboardResponse",
    "DeviceSummary",
    "SystemStatus",
    "TimelineEntry",
]
