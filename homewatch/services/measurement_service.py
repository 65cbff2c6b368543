"""Measurement service layer — raw capability values keyed by managed item."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from homewatch.models import Measurement
from homewatch.schemas.bridge import LightState, SensorState
from homewatch.schemas.readings import MeasurementCreate, ReadingCreate
from homewatch.services.batch_writer import write_batch
from homewatch.services.extractor import extract_light_readings, extract_sensor_readings

logger = logging.getLogger(__name__)

__all__ = [
    "save_sensor_measurements",
    "save_light_measurements",
    "save_measurements_batch",
    "get_latest_measurement",
    "get_measurements",
    "count_measurements",
]

DEFAULT_MEASUREMENTS_LIMIT = 1000


def _to_rows(readings: list[ReadingCreate], item_id: str) -> list[dict[str, Any]]:
    return [
        {
            "item_id": item_id,
            "capability": str(r.capability),
            "value": r.value,
            "recorded_at": r.recorded_at,
        }
        for r in readings
    ]


async def save_sensor_measurements(session: AsyncSession, sensor: SensorState, item_id: str) -> int:
    """Store every capability a sensor currently reports."""
    rows = _to_rows(extract_sensor_readings(sensor), item_id)
    if not rows:
        logger.info(f"No measurements to save for sensor {sensor.id}")
        return 0

    logger.info(
        f"Saving sensor measurements for item {item_id}: "
        f"{[row['capability'] for row in rows]}"
    )
    return await write_batch(session, Measurement, rows, label="sensor measurements")


async def save_light_measurements(session: AsyncSession, light: LightState, item_id: str) -> int:
    """Store every state field a lamp currently reports."""
    rows = _to_rows(extract_light_readings(light), item_id)
    return await write_batch(session, Measurement, rows, label="light measurements")


async def save_measurements_batch(
    session: AsyncSession,
    measurements: list[MeasurementCreate],
) -> int:
    rows = [m.model_dump() for m in measurements]
    for row in rows:
        row["capability"] = str(row["capability"])
    return await write_batch(session, Measurement, rows, label="measurements batch")


async def get_latest_measurement(
    session: AsyncSession,
    item_id: str,
    capability: str,
) -> Measurement | None:
    result = await session.execute(
        select(Measurement)
        .where(Measurement.item_id == item_id, Measurement.capability == capability)
        .order_by(Measurement.recorded_at.desc(), Measurement.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_measurements(
    session: AsyncSession,
    item_id: str,
    capability: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int = DEFAULT_MEASUREMENTS_LIMIT,
) -> list[Measurement]:
    """Fetch an item's measurements newest first."""
    query = select(Measurement).where(Measurement.item_id == item_id)

    if capability:
        query = query.where(Measurement.capability == capability)
    if start:
        query = query.where(Measurement.recorded_at >= start)
    if end:
        query = query.where(Measurement.recorded_at <= end)

    query = query.order_by(Measurement.recorded_at.desc(), Measurement.id.desc()).limit(limit)

    result = await session.execute(query)
    return list(result.scalars().all())


async def count_measurements(
    session: AsyncSession,
    item_id: str,
    start: datetime | None = None,
    end: datetime | None = None,
) -> int:
    query = select(func.count(Measurement.id)).where(Measurement.item_id == item_id)

    if start:
        query = query.where(Measurement.recorded_at >= start)
    if end:
        query = query.where(Measurement.recorded_at <= end)

    result = await session.execute(query)
    return result.scalar_one()
