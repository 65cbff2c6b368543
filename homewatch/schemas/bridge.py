"""Pydantic schemas for vendor bridge objects after parsing."""

from pydantic import BaseModel, ConfigDict, Field

from homewatch.schemas.common import UtcDateTime


class SensorState(BaseModel):
    """Logical sensor: a grouped motion sensor or a contact sensor.

    Absent fields are None; False and 0 are real values.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str | None = None
    type: str = "motion"
    zone_name: str | None = Field(default=None, serialization_alias="zoneName")
    # v1 sensor ids merged into this device; rooms list these
    member_ids: list[str] = Field(default_factory=list, serialization_alias="memberIds")

    presence: bool | None = None
    presence_updated: UtcDateTime | None = Field(
        default=None, serialization_alias="presenceUpdated"
    )
    battery: int | None = None
    reachable: bool | None = None

    temperature: float | None = None
    temperature_updated: UtcDateTime | None = Field(
        default=None, serialization_alias="temperatureUpdated"
    )

    light_level: int | None = Field(default=None, serialization_alias="lightLevel")
    dark: bool | None = None
    daylight: bool | None = None
    light_updated: UtcDateTime | None = Field(default=None, serialization_alias="lightUpdated")

    # "contact" (closed) or "no_contact" (open)
    contact_report: str | None = Field(default=None, serialization_alias="contactReport")
    enabled: bool | None = None
    last_updated: UtcDateTime | None = Field(default=None, serialization_alias="lastUpdated")


class LightStateValues(BaseModel):
    on: bool | None = None
    bri: int | None = None  # 0-254
    ct: int | None = None
    hue: int | None = None
    sat: int | None = None
    reachable: bool | None = None


class LightState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    unique_id: str | None = Field(default=None, serialization_alias="uniqueId")
    name: str | None = None
    type: str | None = None
    model_id: str | None = Field(default=None, serialization_alias="modelId")
    product_name: str | None = Field(default=None, serialization_alias="productName")
    zone_name: str | None = Field(default=None, serialization_alias="zoneName")
    state: LightStateValues = Field(default_factory=LightStateValues)
    last_updated: UtcDateTime | None = Field(default=None, serialization_alias="lastUpdated")


class SwitchState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str | None = None
    switch_type: str = Field(serialization_alias="switchType")  # "dimmer" or "tap"
    last_button_event: int | None = Field(default=None, serialization_alias="lastButtonEvent")
    last_updated: UtcDateTime | None = Field(default=None, serialization_alias="lastUpdated")
    battery: int | None = None
    reachable: bool | None = None


class Room(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    room_class: str | None = Field(default=None, serialization_alias="class")
    lights: list[str] = Field(default_factory=list)
    sensors: list[str] = Field(default_factory=list)
    all_on: bool = Field(default=False, serialization_alias="allOn")
    any_on: bool = Field(default=False, serialization_alias="anyOn")
    sensor_details: list[SensorState] = Field(
        default_factory=list, serialization_alias="sensorDetails"
    )
    light_details: list[LightState] = Field(
        default_factory=list, serialization_alias="lightDetails"
    )


class BridgeConfig(BaseModel):
    """Joined result of one full bridge fetch."""

    model_config = ConfigDict(populate_by_name=True)

    rooms: list[Room]
    sensors: list[SensorState]
    lights: list[LightState]
    switches: list[SwitchState]
    contact_sensors: list[SensorState] = Field(serialization_alias="contactSensors")
