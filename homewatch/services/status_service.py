"""Status service layer — live status, today's timeline and device overview."""

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from homewatch.capabilities import describe_capability, guess_device_type
from homewatch.config import TIMEZONE
from homewatch.models import Item
from homewatch.schemas.dashboard import (
    DashboardResponse,
    DeviceSummary,
    SystemStatus,
    TimelineEntry,
)
from homewatch.schemas.readings import ReadingOut
from homewatch.services.readings_service import get_readings

__all__ = [
    "build_timeline",
    "compute_status",
    "get_dashboard",
    "group_devices",
    "is_online",
]

# Constants
STALE_AFTER = timedelta(minutes=60)
ONLINE_WITHIN = timedelta(minutes=30)
TIMELINE_LIMIT = 20
DASHBOARD_READINGS = 500


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)  # Use naive UTC for SQLite


def _location(reading: ReadingOut) -> str:
    return reading.device_name or reading.device_id


def is_online(last_activity: datetime | None, now: datetime) -> bool:
    """A device is online when it reported within the last 30 minutes."""
    if last_activity is None:
        return False
    return now - last_activity < ONLINE_WITHIN


def group_devices(readings: Sequence[ReadingOut], now: datetime) -> list[DeviceSummary]:
    """
    Fold newest-first readings into one summary per device.

    The first reading seen for a device fixes its last activity and type;
    each capability keeps its most recent value.
    """
    devices: dict[str, DeviceSummary] = {}

    for reading in readings:
        device = devices.get(reading.device_id)
        if device is None:
            device = DeviceSummary(
                id=reading.device_id,
                name=_location(reading),
                type=guess_device_type(reading.capability),
                online=is_online(reading.recorded_at, now),
                last_activity=reading.recorded_at,
                capabilities={},
            )
            devices[reading.device_id] = device

        device.capabilities.setdefault(reading.capability, reading.value)
        if reading.capability == "battery" and device.battery is None:
            device.battery = reading.value

    return list(devices.values())


async def _registered_devices(session: AsyncSession, seen: set[str]) -> list[DeviceSummary]:
    """Managed items that have not reported any of the fetched readings."""
    result = await session.execute(select(Item).order_by(Item.name))
    return [
        DeviceSummary(
            id=item.external_id or item.id,
            name=item.name,
            type=item.item_type,
            online=False,
            capabilities={},
        )
        for item in result.scalars()
        if (item.external_id or item.id) not in seen
    ]


def compute_status(
    devices: Sequence[DeviceSummary],
    readings: Sequence[ReadingOut],
    now: datetime,
) -> SystemStatus:
    """Normal while the newest reading is at most 60 minutes old."""
    if not devices:
        return SystemStatus(level="attention", message="No sensors connected")

    if not readings:
        return SystemStatus(level="attention", message="Waiting for sensor data")

    most_recent = readings[0]
    location = _location(most_recent)

    if now - most_recent.recorded_at > STALE_AFTER:
        return SystemStatus(
            level="attention",
            message="No recent activity",
            last_activity=most_recent.recorded_at,
            last_activity_location=location,
        )

    return SystemStatus(
        level="normal",
        message="System active",
        last_activity=most_recent.recorded_at,
        last_activity_location=location,
    )


def build_timeline(
    readings: Sequence[ReadingOut],
    now: datetime,
    tz: tzinfo,
) -> list[TimelineEntry]:
    """Today's readings (local calendar day), newest first, at most 20."""
    local_now = now.replace(tzinfo=UTC).astimezone(tz)
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)

    timeline: list[TimelineEntry] = []
    for reading in readings:
        local_at = reading.recorded_at.replace(tzinfo=UTC).astimezone(tz)
        if local_at < midnight:
            continue
        timeline.append(
            TimelineEntry(
                time=local_at.strftime("%H:%M"),
                event=describe_capability(reading.capability, reading.value),
                location=_location(reading),
                capability=reading.capability,
            )
        )
        if len(timeline) == TIMELINE_LIMIT:
            break

    return timeline


async def get_dashboard(
    session: AsyncSession,
    *,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> DashboardResponse:
    """
    Build status, timeline and device overview from the latest readings.

    Registered items without readings are listed as offline devices, so a
    household with items but no data yet is waiting rather than empty.
    """
    now = now or _utcnow()
    tz = tz or ZoneInfo(TIMEZONE)

    readings = await get_readings(session, limit=DASHBOARD_READINGS)
    devices = group_devices(readings, now)
    devices += await _registered_devices(session, {d.id for d in devices})

    return DashboardResponse(
        status=compute_status(devices, readings, now),
        timeline=build_timeline(readings, now, tz),
        devices=devices,
    )
