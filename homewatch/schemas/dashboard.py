"""Pydantic schemas for the live status view."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from homewatch.schemas.common import UtcDateTime


class DeviceSummary(BaseModel):
    """A device as seen through its most recent readings."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    type: str
    online: bool
    battery: Any = None
    last_activity: UtcDateTime | None = Field(default=None, serialization_alias="lastActivity")
    capabilities: dict[str, Any]


class SystemStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    level: Literal["normal", "attention"]
    message: str
    last_activity: UtcDateTime | None = Field(default=None, serialization_alias="lastActivity")
    last_activity_location: str = Field(default="-", serialization_alias="lastActivityLocation")


class TimelineEntry(BaseModel):
    time: str  # local "HH:MM"
    event: str
    location: str
    capability: str


class DashboardResponse(BaseModel):
    status: SystemStatus
    timeline: list[TimelineEntry]
    devices: list[DeviceSummary]
