"""Readings service layer — writes, range reads and statistics for sensor_readings."""

import json
import logging
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import ValidationError
from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from homewatch.capabilities import Capability, Trigger, get_trigger
from homewatch.models import SensorReading
from homewatch.schemas.common import Scalar
from homewatch.schemas.readings import (
    CapabilityStats,
    DeviceSnapshot,
    ReadingCreate,
    ReadingOut,
    StatPoint,
)
from homewatch.services.batch_writer import write_batch

logger = logging.getLogger(__name__)

__all__ = [
    "save_reading",
    "save_snapshot",
    "save_batch",
    "get_readings",
    "scan_active_readings",
    "get_all_active_readings",
    "get_capability_stats",
    "delete_old_readings",
]

# Constants
SCAN_PAGE_SIZE = 1000
DEFAULT_READINGS_LIMIT = 100
DEFAULT_STATS_DAYS = 7
DEFAULT_RETENTION_DAYS = 30

KNOWN_CAPABILITIES = {c.value for c in Capability}


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)  # Use naive UTC for SQLite


def serialize_value(value: Scalar) -> str:
    return json.dumps(value)


def deserialize_value(raw: str) -> Any:
    """Decode a stored value; rows written by other tools may hold bare text."""
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return raw


def is_active(raw: Any) -> bool:
    """True only for a stored boolean true; malformed values never raise."""
    try:
        return json.loads(raw) is True
    except (TypeError, ValueError):
        return raw == "true" or raw is True


def _to_row(reading: ReadingCreate) -> dict[str, Any]:
    row = {
        "device_id": reading.device_id,
        "device_name": reading.device_name,
        "capability": str(reading.capability),
        "value": serialize_value(reading.value),
        "zone_name": reading.zone_name,
    }
    # Omitted so the database assigns the insert time
    if reading.recorded_at is not None:
        row["recorded_at"] = reading.recorded_at
    return row


def _to_out(row: SensorReading) -> ReadingOut:
    return ReadingOut(
        id=row.id,
        device_id=row.device_id,
        device_name=row.device_name,
        capability=row.capability,
        value=deserialize_value(row.value),
        zone_name=row.zone_name,
        recorded_at=row.recorded_at,
    )


# --- Write paths ---


async def save_reading(
    session: AsyncSession,
    device: DeviceSnapshot,
    capability: Capability,
    value: Scalar,
) -> int:
    """Save a single capability value of a device."""
    reading = ReadingCreate(
        device_id=device.id,
        device_name=device.name,
        capability=capability,
        value=value,
        zone_name=device.zone_name,
    )
    return await write_batch(session, SensorReading, [_to_row(reading)], label="reading")


async def save_snapshot(session: AsyncSession, device: DeviceSnapshot) -> int:
    """Save every known capability of a device snapshot as one batch."""
    rows: list[dict[str, Any]] = []
    for capability, value in device.capabilities.items():
        if value is None:
            continue
        if capability not in KNOWN_CAPABILITIES:
            logger.warning(f"Skipping unknown capability '{capability}' of device {device.id}")
            continue
        try:
            reading = ReadingCreate(
                device_id=device.id,
                device_name=device.name,
                capability=capability,
                value=value,
                zone_name=device.zone_name,
            )
        except ValidationError:
            logger.warning(f"Skipping {capability}={value!r} of {device.id}: wrong value type")
            continue
        rows.append(_to_row(reading))

    return await write_batch(session, SensorReading, rows, label="snapshot")


async def save_batch(session: AsyncSession, readings: list[ReadingCreate]) -> int:
    """Save pre-built readings (e.g. from the extractor) in one bulk insert."""
    return await write_batch(
        session, SensorReading, [_to_row(r) for r in readings], label="readings batch"
    )


# --- Read paths ---


async def get_readings(
    session: AsyncSession,
    device_id: str | None = None,
    capability: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int = DEFAULT_READINGS_LIMIT,
) -> list[ReadingOut]:
    """Fetch readings newest first, optionally filtered."""
    query = select(SensorReading)

    if device_id:
        query = query.where(SensorReading.device_id == device_id)
    if capability:
        query = query.where(SensorReading.capability == capability)
    if start:
        query = query.where(SensorReading.recorded_at >= start)
    if end:
        query = query.where(SensorReading.recorded_at <= end)

    query = query.order_by(SensorReading.recorded_at.desc(), SensorReading.id.desc()).limit(limit)

    result = await session.execute(query)
    return [_to_out(row) for row in result.scalars()]


async def scan_active_readings(
    session: AsyncSession,
    start: datetime,
    end: datetime,
) -> AsyncIterator[ReadingOut]:
    """
    Walk every reading in [start, end] and yield only activation events.

    Pages of SCAN_PAGE_SIZE rows are fetched in (recorded_at, id) order and
    resumed strictly after the last row seen, so rows sharing a timestamp at
    a page boundary are neither skipped nor repeated.

    - Edge-triggered capabilities (contact) yield on a transition to true:
      a door that stays open is counted once.
    - Level-triggered capabilities (motion, vibration, ...) yield every true.

    The previous state per (device, capability) lives only for this call and
    is updated for every row, emitted or not.
    """
    prev_state: dict[tuple[str, str], bool] = {}
    cursor: tuple[datetime, int] | None = None
    total = 0

    while True:
        query = select(SensorReading).where(
            and_(
                SensorReading.recorded_at >= start,
                SensorReading.recorded_at <= end,
            )
        )
        if cursor is not None:
            last_at, last_id = cursor
            query = query.where(
                or_(
                    SensorReading.recorded_at > last_at,
                    and_(SensorReading.recorded_at == last_at, SensorReading.id > last_id),
                )
            )
        query = query.order_by(SensorReading.recorded_at, SensorReading.id).limit(SCAN_PAGE_SIZE)

        result = await session.execute(query)
        page = result.scalars().all()
        if not page:
            break

        for row in page:
            active = is_active(row.value)
            key = (row.device_id, row.capability)

            if get_trigger(row.capability) is Trigger.EDGE:
                emit = active and prev_state.get(key) is not True
            else:
                emit = active

            prev_state[key] = active

            if emit:
                total += 1
                yield _to_out(row)

        cursor = (page[-1].recorded_at, page[-1].id)
        if len(page) < SCAN_PAGE_SIZE:
            break

    logger.info(f"Scan {start} -> {end}: {total} active readings")


async def get_all_active_readings(
    session: AsyncSession,
    start: datetime,
    end: datetime,
) -> list[ReadingOut]:
    """Collect a full scan into a list."""
    return [reading async for reading in scan_active_readings(session, start, end)]


async def get_capability_stats(
    session: AsyncSession,
    device_id: str,
    capability: str,
    days: int = DEFAULT_STATS_DAYS,
    *,
    now: datetime | None = None,
) -> CapabilityStats:
    """
    Compute count/min/max/avg for one device capability over the last `days`.

    Only numeric values feed min/max/avg (booleans are not numbers here);
    when there are none those fields stay None. `data` always holds every
    value in the window, oldest first.
    """
    end_time = now or _utcnow()
    start_time = end_time - timedelta(days=days)

    result = await session.execute(
        select(SensorReading.value, SensorReading.recorded_at)
        .where(
            and_(
                SensorReading.device_id == device_id,
                SensorReading.capability == capability,
                SensorReading.recorded_at >= start_time,
                SensorReading.recorded_at <= end_time,
            )
        )
        .order_by(SensorReading.recorded_at, SensorReading.id)
    )

    data = [
        StatPoint(value=deserialize_value(raw), timestamp=recorded_at)
        for raw, recorded_at in result.all()
    ]
    numeric = [
        p.value for p in data if isinstance(p.value, int | float) and not isinstance(p.value, bool)
    ]

    stats = CapabilityStats(
        device_id=device_id,
        capability=capability,
        window_days=days,
        count=len(data),
        data=data,
    )
    if numeric:
        stats.min = min(numeric)
        stats.max = max(numeric)
        stats.avg = sum(numeric) / len(numeric)
    return stats


async def delete_old_readings(
    session: AsyncSession,
    days_to_keep: int = DEFAULT_RETENTION_DAYS,
    *,
    now: datetime | None = None,
) -> int:
    """Delete readings older than `days_to_keep` days; returns rows removed."""
    cutoff = (now or _utcnow()) - timedelta(days=days_to_keep)

    result = await session.execute(delete(SensorReading).where(SensorReading.recorded_at < cutoff))
    await session.commit()

    logger.info(f"Deleted {result.rowcount} readings older than {cutoff}")
    return result.rowcount
