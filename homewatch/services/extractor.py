"""Capability extractor — flattens one sensor or lamp into normalized readings."""

from collections.abc import Callable
from datetime import UTC, datetime

from homewatch.capabilities import Capability
from homewatch.schemas.bridge import LightState, SensorState
from homewatch.schemas.common import Scalar
from homewatch.schemas.readings import ReadingCreate

__all__ = ["extract_sensor_readings", "extract_light_readings", "contact_is_open", "utcnow"]

Clock = Callable[[], datetime]

# (sensor field, capability, field holding the capability-specific timestamp)
SENSOR_FIELDS: list[tuple[str, Capability, str | None]] = [
    ("presence", Capability.PRESENCE, "presence_updated"),
    ("temperature", Capability.TEMPERATURE, "temperature_updated"),
    ("light_level", Capability.LIGHTLEVEL, "light_updated"),
    ("dark", Capability.DARK, "light_updated"),
    ("daylight", Capability.DAYLIGHT, "light_updated"),
    ("battery", Capability.BATTERY, None),
    ("reachable", Capability.REACHABLE, None),
]

LIGHT_FIELDS: list[tuple[str, Capability]] = [
    ("on", Capability.ON),
    ("bri", Capability.BRIGHTNESS),
    ("ct", Capability.COLOR_TEMP),
    ("hue", Capability.HUE),
    ("sat", Capability.SATURATION),
    ("reachable", Capability.REACHABLE),
]


def utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)  # Use naive UTC for SQLite


def contact_is_open(report: str | None) -> bool | None:
    """Map a contact report to the stored value: True = open, None = unknown."""
    if report == "no_contact":
        return True
    if report == "contact":
        return False
    return None


def extract_sensor_readings(
    sensor: SensorState,
    *,
    now: Clock = utcnow,
) -> list[ReadingCreate]:
    """
    Produce one reading per capability field present on a sensor.

    Timestamps fall back from the capability's own update time to the shared
    one (presence_updated, then last_updated), and finally to now().
    """
    shared_at = sensor.presence_updated or sensor.last_updated or now()

    readings: list[ReadingCreate] = []
    for field, capability, updated_field in SENSOR_FIELDS:
        value = getattr(sensor, field)
        if value is None:
            continue
        recorded_at = getattr(sensor, updated_field) if updated_field else None
        readings.append(_reading(sensor, capability, value, recorded_at or shared_at))

    is_open = contact_is_open(sensor.contact_report)
    if is_open is not None:
        readings.append(
            _reading(sensor, Capability.CONTACT, is_open, sensor.last_updated or shared_at)
        )

    return readings


def extract_light_readings(
    light: LightState,
    *,
    now: Clock = utcnow,
) -> list[ReadingCreate]:
    """Produce one reading per lamp state field, all sharing one timestamp."""
    recorded_at = light.last_updated or now()

    readings: list[ReadingCreate] = []
    for field, capability in LIGHT_FIELDS:
        value = getattr(light.state, field)
        if value is None:
            continue
        readings.append(_reading(light, capability, value, recorded_at))

    return readings


def _reading(
    source: SensorState | LightState,
    capability: Capability,
    value: Scalar,
    recorded_at: datetime,
) -> ReadingCreate:
    return ReadingCreate(
        device_id=source.id,
        device_name=source.name,
        capability=capability,
        value=value,
        zone_name=source.zone_name,
        recorded_at=recorded_at,
    )
