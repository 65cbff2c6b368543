"""Capability registry for eliminating repetitive capability branching."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal


class Capability(StrEnum):
    """Semantic kind of a reading's value."""

    PRESENCE = "presence"
    MOTION = "motion"
    VIBRATION = "vibration"
    CONTACT = "contact"
    TEMPERATURE = "temperature"
    LIGHTLEVEL = "lightlevel"
    DARK = "dark"
    DAYLIGHT = "daylight"
    BATTERY = "battery"
    REACHABLE = "reachable"
    ON = "on"
    BRIGHTNESS = "brightness"
    COLOR_TEMP = "color_temp"
    HUE = "hue"
    SATURATION = "saturation"


class Trigger(StrEnum):
    """How a boolean reading becomes an activity event.

    EDGE: only a false -> true transition counts (a door opening).
    LEVEL: every true observation counts (motion).
    """

    EDGE = "edge"
    LEVEL = "level"


ValueKind = Literal["boolean", "numeric"]


@dataclass(frozen=True)
class CapabilityConfig:
    """Configuration for one capability's value type and presentation."""

    kind: ValueKind
    trigger: Trigger = Trigger.LEVEL
    # Timeline label for a parsed value
    describe: Callable[[Any], str] | None = None
    # Coarse device type a capability implies when grouping readings
    device_type: str = "sensor"


def _toggle(on_text: str, off_text: str) -> Callable[[Any], str]:
    def describe(value: Any) -> str:
        return on_text if value else off_text

    return describe


def _format_battery(value: Any) -> str:
    return f"Battery: {value}%"


def _format_temperature(value: Any) -> str:
    return f"Temperature: {value}°C"


CAPABILITY_REGISTRY: dict[Capability, CapabilityConfig] = {
    Capability.PRESENCE: CapabilityConfig(
        kind="boolean",
        describe=_toggle("Presence detected", "No presence"),
        device_type="presence",
    ),
    Capability.MOTION: CapabilityConfig(
        kind="boolean",
        describe=_toggle("Motion detected", "No motion"),
        device_type="motion",
    ),
    Capability.VIBRATION: CapabilityConfig(
        kind="boolean",
        describe=_toggle("Vibration detected", "No vibration"),
        device_type="vibration",
    ),
    Capability.CONTACT: CapabilityConfig(
        kind="boolean",
        trigger=Trigger.EDGE,
        describe=_toggle("Opened", "Closed"),
        device_type="door",
    ),
    Capability.TEMPERATURE: CapabilityConfig(
        kind="numeric",
        describe=_format_temperature,
        device_type="temperature",
    ),
    Capability.LIGHTLEVEL: CapabilityConfig(kind="numeric"),
    Capability.DARK: CapabilityConfig(kind="boolean"),
    Capability.DAYLIGHT: CapabilityConfig(kind="boolean"),
    Capability.BATTERY: CapabilityConfig(kind="numeric", describe=_format_battery),
    Capability.REACHABLE: CapabilityConfig(kind="boolean"),
    Capability.ON: CapabilityConfig(
        kind="boolean",
        describe=_toggle("Light on", "Light off"),
        device_type="light",
    ),
    Capability.BRIGHTNESS: CapabilityConfig(kind="numeric", device_type="light"),
    Capability.COLOR_TEMP: CapabilityConfig(kind="numeric", device_type="light"),
    Capability.HUE: CapabilityConfig(kind="numeric", device_type="light"),
    Capability.SATURATION: CapabilityConfig(kind="numeric", device_type="light"),
}


def get_capability_config(capability: str) -> CapabilityConfig | None:
    """Get configuration for a capability, or None for an unknown tag."""
    try:
        return CAPABILITY_REGISTRY[Capability(capability)]
    except ValueError:
        return None


def get_trigger(capability: str) -> Trigger:
    """Unknown capabilities are level-triggered."""
    config = get_capability_config(capability)
    return config.trigger if config else Trigger.LEVEL


def describe_capability(capability: str, value: Any) -> str:
    """Human-readable timeline label for a capability value."""
    config = get_capability_config(capability)
    if config and config.describe:
        return config.describe(value)
    return f"{capability}: {value}"


def guess_device_type(capability: str) -> str:
    config = get_capability_config(capability)
    return config.device_type if config else "sensor"


def coerce_value(capability: str, value: Any) -> Any:
    """Check a value against its capability's kind.

    Boolean capabilities also accept the strings "true"/"false". Numeric
    capabilities reject booleans. Unknown capabilities pass through.
    """
    config = get_capability_config(capability)
    if config is None:
        return value

    if config.kind == "boolean":
        if isinstance(value, bool):
            return value
        if value in ("true", "false"):
            return value == "true"
        raise ValueError(f"{capability} expects a boolean, got {value!r}")

    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"{capability} expects a number, got {value!r}")
    return value
