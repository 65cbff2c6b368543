#!/usr/bin/env python3
"""Generate 48 hours of household sensor readings for local development."""

import asyncio
import random
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete, select

from homewatch.capabilities import Capability
from homewatch.database import async_session
from homewatch.models import SensorReading
from homewatch.schemas import ReadingCreate
from homewatch.services import save_batch

# Fixed seed for reproducibility
RANDOM_SEED = 42

# Time configuration
HOURS_TO_GENERATE = 48
INTERVAL_MINUTES = 5

# (device_id, device_name, zone_name)
MOTION_SENSORS = [
    ("00:17:88:01:02:aa:bb:01", "Hallway", "Hallway"),
    ("00:17:88:01:02:aa:bb:02", "Kitchen", "Kitchen"),
]
DOOR_SENSORS = [
    ("c1f0e6a2-front-door", "Front door", "Hallway"),
]
TEMP_BASELINES = {
    "00:17:88:01:02:aa:bb:01": 19.5,
    "00:17:88:01:02:aa:bb:02": 21.0,
}


def _is_daytime(moment: datetime) -> bool:
    return 7 <= moment.hour <= 22


def generate_motion_readings(
    device: tuple[str, str, str],
    start_time: datetime,
    end_time: datetime,
) -> list[ReadingCreate]:
    """Presence, temperature and battery readings of one motion sensor."""
    device_id, name, zone = device
    readings = []
    current_time = start_time
    battery = 100

    while current_time <= end_time:
        presence = random.random() < (0.2 if _is_daytime(current_time) else 0.02)
        temperature = TEMP_BASELINES[device_id] + random.uniform(-0.5, 0.5)
        values = [
            (Capability.PRESENCE, presence),
            (Capability.TEMPERATURE, round(temperature, 2)),
            (Capability.BATTERY, battery),
        ]
        for capability, value in values:
            readings.append(
                ReadingCreate(
                    device_id=device_id,
                    device_name=name,
                    capability=capability,
                    value=value,
                    zone_name=zone,
                    recorded_at=current_time,
                )
            )
        if random.random() < 0.01:
            battery = max(battery - 1, 0)
        current_time += timedelta(minutes=INTERVAL_MINUTES)

    return readings


def generate_door_readings(
    device: tuple[str, str, str],
    start_time: datetime,
    end_time: datetime,
) -> list[ReadingCreate]:
    """Contact readings; the door stays open for a few samples at a time."""
    device_id, name, zone = device
    readings = []
    current_time = start_time
    is_open = False

    while current_time <= end_time:
        if is_open:
            is_open = random.random() < 0.5
        elif _is_daytime(current_time):
            is_open = random.random() < 0.05

        readings.append(
            ReadingCreate(
                device_id=device_id,
                device_name=name,
                capability=Capability.CONTACT,
                value=is_open,
                zone_name=zone,
                recorded_at=current_time,
            )
        )
        current_time += timedelta(minutes=INTERVAL_MINUTES)

    return readings


async def generate_all_data() -> None:
    """Generate 48 hours of sensor data."""
    random.seed(RANDOM_SEED)

    end_time = datetime.now(UTC).replace(tzinfo=None, second=0, microsecond=0)
    start_time = end_time - timedelta(hours=HOURS_TO_GENERATE)

    print(f"Generating data from {start_time} to {end_time}")

    async with async_session() as session:
        # Check if data already exists
        result = await session.execute(select(SensorReading).limit(1))
        if result.scalar_one_or_none():
            print("Data already exists. Run with --reset to regenerate.")
            return

        readings: list[ReadingCreate] = []
        for device in MOTION_SENSORS:
            readings.extend(generate_motion_readings(device, start_time, end_time))
        for device in DOOR_SENSORS:
            readings.extend(generate_door_readings(device, start_time, end_time))

        written = await save_batch(session, readings)
        device_count = len(MOTION_SENSORS) + len(DOOR_SENSORS)
        print(f"Generated {written} readings for {device_count} devices.")


async def clear_readings() -> None:
    """Clear all reading data."""
    async with async_session() as session:
        await session.execute(delete(SensorReading))
        await session.commit()
    print("Cleared all readings.")


async def reset_and_generate() -> None:
    """Clear existing data and regenerate."""
    await clear_readings()
    await generate_all_data()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "--reset":
        asyncio.run(reset_and_generate())
    else:
        asyncio.run(generate_all_data())
