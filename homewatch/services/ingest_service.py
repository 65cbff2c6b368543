"""Ingest service layer — turns one bridge fetch into stored readings."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from homewatch.schemas.bridge import BridgeConfig
from homewatch.schemas.readings import ReadingCreate
from homewatch.services.extractor import (
    Clock,
    extract_light_readings,
    extract_sensor_readings,
    utcnow,
)
from homewatch.services.readings_service import save_batch

logger = logging.getLogger(__name__)

__all__ = ["collect_readings", "ingest_bridge_config"]


def collect_readings(config: BridgeConfig, *, now: Clock = utcnow) -> list[ReadingCreate]:
    """Extract readings for every sensor and lamp of a bridge fetch."""
    readings: list[ReadingCreate] = []
    for sensor in config.sensors:
        readings.extend(extract_sensor_readings(sensor, now=now))
    for light in config.lights:
        readings.extend(extract_light_readings(light, now=now))
    return readings


async def ingest_bridge_config(
    session: AsyncSession,
    config: BridgeConfig,
    *,
    now: Clock = utcnow,
) -> int:
    """Store one bridge fetch as a single batch; returns rows written."""
    readings = collect_readings(config, now=now)
    written = await save_batch(session, readings)

    if readings and not written:
        logger.warning(f"Poll cycle lost {len(readings)} readings")
    return written
