"""Bridge service layer — fetches and joins the vendor bridge state."""

import asyncio
import logging
from typing import Any, Protocol

import httpx

from homewatch.schemas.bridge import BridgeConfig, LightState, Room, SensorState, SwitchState
from homewatch.services.grouping import (
    group_sensors,
    parse_contact_sensors,
    parse_lights,
    parse_rooms,
    parse_switches,
)

logger = logging.getLogger(__name__)

__all__ = ["BridgeError", "BridgeSource", "HueProxyClient", "get_full_config"]

DEFAULT_TIMEOUT_SECONDS = 15.0


class BridgeError(Exception):
    """The bridge (or its proxy) refused or failed a request."""


class BridgeSource(Protocol):
    """Anything that can return a raw bridge endpoint payload."""

    async def fetch(self, endpoint: str, api_version: str = "v1") -> dict[str, Any]: ...


class HueProxyClient:
    """Reads bridge endpoints through the remote API proxy.

    The proxy attaches the OAuth access token; obtaining and refreshing that
    token happens elsewhere.
    """

    def __init__(
        self,
        proxy_url: str,
        access_token: str,
        username: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.proxy_url = proxy_url
        self.access_token = access_token
        self.username = username
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch(self, endpoint: str, api_version: str = "v1") -> dict[str, Any]:
        response = await self._client.post(
            self.proxy_url,
            json={
                "endpoint": endpoint,
                "accessToken": self.access_token,
                "username": self.username,
                "apiVersion": api_version,
            },
        )
        if response.is_error:
            try:
                detail = response.json().get("error")
            except (ValueError, AttributeError):
                detail = None
            raise BridgeError(detail or f"Failed to get {endpoint} ({response.status_code})")
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()


async def _get_rooms(source: BridgeSource) -> list[Room]:
    return parse_rooms(await source.fetch("groups"))


async def _get_sensors(source: BridgeSource) -> list[SensorState]:
    return group_sensors(await source.fetch("sensors"))


async def _get_lights(source: BridgeSource) -> list[LightState]:
    return parse_lights(await source.fetch("lights"))


async def _get_switches(source: BridgeSource) -> list[SwitchState]:
    return parse_switches(await source.fetch("sensors"))


async def _get_contact_sensors(source: BridgeSource) -> list[SensorState]:
    """Contact sensors only exist on v2-capable bridges; missing means none."""
    try:
        return parse_contact_sensors(await source.fetch("contact", api_version="v2"))
    except Exception as e:
        logger.warning(f"Contact sensors not available: {e}")
        return []


async def get_full_config(source: BridgeSource) -> BridgeConfig:
    """
    Fetch rooms, sensors, lights, switches and contact sensors concurrently.

    The fetches are independent and read-only. A failure in any required one
    propagates; contact sensors degrade to an empty list.
    """
    rooms, sensors, lights, switches, contact_sensors = await asyncio.gather(
        _get_rooms(source),
        _get_sensors(source),
        _get_lights(source),
        _get_switches(source),
        _get_contact_sensors(source),
    )

    # Rooms list v1 sub-sensor ids; a device belongs if any of its members is listed
    for room in rooms:
        listed = set(room.sensors)
        room.sensor_details = [s for s in sensors if listed & set(s.member_ids)]
        room.light_details = [light for light in lights if light.id in room.lights]
        for sensor in room.sensor_details:
            sensor.zone_name = sensor.zone_name or room.name
        for light in room.light_details:
            light.zone_name = light.zone_name or room.name

    logger.info(
        f"Bridge fetched: {len(rooms)} rooms, {len(sensors)} sensors, {len(lights)} lights, "
        f"{len(switches)} switches, {len(contact_sensors)} contact sensors"
    )

    return BridgeConfig(
        rooms=rooms,
        sensors=[*sensors, *contact_sensors],
        lights=lights,
        switches=switches,
        contact_sensors=contact_sensors,
    )
