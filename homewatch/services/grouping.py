"""Vendor payload parsing — groups sub-sensors into logical devices.

A Hue motion sensor shows up as three v1 sensor entries (presence,
temperature, light level) whose ``uniqueid`` share the part before the
first dash. They are merged here into one SensorState.
"""

import logging
from collections.abc import Mapping
from typing import Any

from homewatch.schemas.bridge import LightState, LightStateValues, Room, SensorState, SwitchState

logger = logging.getLogger(__name__)

__all__ = [
    "group_sensors",
    "identity_prefix",
    "parse_contact_sensors",
    "parse_lights",
    "parse_rooms",
    "parse_switches",
]

PRESENCE_TYPE = "ZLLPresence"
TEMPERATURE_TYPE = "ZLLTemperature"
LIGHT_LEVEL_TYPE = "ZLLLightLevel"
SWITCH_TYPES = {"ZLLSwitch": "dimmer", "ZGPSwitch": "tap"}

# Hue reports temperature in 0.01 °C
TEMPERATURE_SCALE = 100


def identity_prefix(unique_id: str | None) -> str | None:
    """Physical device identity shared by all sub-sensors."""
    if not unique_id:
        return None
    return unique_id.split("-")[0] or None


def _timestamp(value: Any) -> str | None:
    # The bridge reports "none" for sensors that never updated
    if value in (None, "", "none"):
        return None
    return value


def _clean_name(name: str) -> str:
    return name.replace(" motion sensor", "").replace(" presence", "")


def group_sensors(raw_sensors: Mapping[str, dict[str, Any]]) -> list[SensorState]:
    """
    Merge v1 sub-sensor records into logical devices keyed by identity prefix.

    Pass one folds every member into its group, pass two drops groups that
    never resolved a display name (no presence member). Output keeps the
    order in which each prefix was first seen.
    """
    groups: dict[str, dict[str, Any]] = {}

    for sensor_id, raw in raw_sensors.items():
        prefix = identity_prefix(raw.get("uniqueid"))
        if prefix is None:
            continue

        group = groups.setdefault(prefix, {"id": prefix, "member_ids": []})
        group["member_ids"].append(sensor_id)
        state = raw.get("state") or {}
        config = raw.get("config") or {}
        sensor_type = raw.get("type")

        if sensor_type == PRESENCE_TYPE:
            group["name"] = _clean_name(raw.get("name") or "")
            group["presence"] = state.get("presence") or False
            group["presence_updated"] = _timestamp(state.get("lastupdated"))
            group["battery"] = config.get("battery")
            group["reachable"] = config.get("reachable")
        elif sensor_type == TEMPERATURE_TYPE:
            raw_temperature = state.get("temperature")
            group["temperature"] = (
                raw_temperature / TEMPERATURE_SCALE if raw_temperature is not None else None
            )
            group["temperature_updated"] = _timestamp(state.get("lastupdated"))
        elif sensor_type == LIGHT_LEVEL_TYPE:
            group["light_level"] = state.get("lightlevel")
            group["dark"] = state.get("dark")
            group["daylight"] = state.get("daylight")
            group["light_updated"] = _timestamp(state.get("lastupdated"))

    for group in groups.values():
        group["member_ids"].sort()

    named = [SensorState(**group) for group in groups.values() if group.get("name")]
    logger.debug(f"Grouped {len(raw_sensors)} sub-sensors into {len(named)} devices")
    return named


def parse_contact_sensors(payload: Mapping[str, Any]) -> list[SensorState]:
    """Parse a v2 ``contact`` resource listing ({"data": [...]})."""
    contacts = payload.get("data") or []
    return [
        SensorState(
            id=contact["id"],
            name=(contact.get("metadata") or {}).get("name") or "Contact Sensor",
            type="contact",
            contact_report=(contact.get("contact_report") or {}).get("state") or "unknown",
            last_updated=_timestamp((contact.get("contact_report") or {}).get("changed")),
            enabled=contact.get("enabled"),
        )
        for contact in contacts
    ]


def parse_lights(payload: Mapping[str, dict[str, Any]]) -> list[LightState]:
    lights: list[LightState] = []
    for light_id, light in payload.items():
        state = light.get("state") or {}
        lights.append(
            LightState(
                id=light_id,
                unique_id=light.get("uniqueid"),
                name=light.get("name"),
                type=light.get("type"),
                model_id=light.get("modelid"),
                product_name=light.get("productname"),
                state=LightStateValues(
                    on=state.get("on") or False,
                    bri=state.get("bri"),
                    ct=state.get("ct"),
                    hue=state.get("hue"),
                    sat=state.get("sat"),
                    reachable=state.get("reachable"),
                ),
            )
        )
    return lights


def parse_rooms(payload: Mapping[str, dict[str, Any]]) -> list[Room]:
    """Keep only ``Room`` groups (not zones or entertainment areas)."""
    rooms: list[Room] = []
    for group_id, group in payload.items():
        if group.get("type") != "Room":
            continue
        state = group.get("state") or {}
        rooms.append(
            Room(
                id=group_id,
                name=group.get("name") or group_id,
                room_class=group.get("class"),
                lights=group.get("lights") or [],
                sensors=group.get("sensors") or [],
                all_on=state.get("all_on") or False,
                any_on=state.get("any_on") or False,
            )
        )
    return rooms


def parse_switches(payload: Mapping[str, dict[str, Any]]) -> list[SwitchState]:
    switches: list[SwitchState] = []
    for sensor_id, sensor in payload.items():
        switch_type = SWITCH_TYPES.get(sensor.get("type"))
        if switch_type is None:
            continue
        state = sensor.get("state") or {}
        config = sensor.get("config") or {}
        switches.append(
            SwitchState(
                id=identity_prefix(sensor.get("uniqueid")) or sensor_id,
                name=sensor.get("name"),
                switch_type=switch_type,
                last_button_event=state.get("buttonevent"),
                last_updated=_timestamp(state.get("lastupdated")),
                battery=config.get("battery"),
                reachable=config.get("reachable"),
            )
        )
    return switches
