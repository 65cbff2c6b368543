"""Tests for the item measurement service and bridge ingestion."""

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from homewatch.models import Item, SensorReading
from homewatch.schemas import (
    BridgeConfig,
    LightState,
    LightStateValues,
    MeasurementCreate,
    SensorState,
)
from homewatch.services.ingest_service import collect_readings, ingest_bridge_config
from homewatch.services.measurement_service import (
    count_measurements,
    get_latest_measurement,
    get_measurements,
    save_light_measurements,
    save_measurements_batch,
    save_sensor_measurements,
)

NOW = datetime(2026, 10, 19, 12, 0, 0)


def fixed_clock() -> datetime:
    return NOW


@pytest.fixture
async def item(session):
    item = Item(id="item-hall", name="Hallway sensor", item_type="sensor", room="Hallway")
    session.add(item)
    await session.commit()
    return item


@pytest.mark.asyncio
async def test_save_sensor_measurements(session, item):
    """Test each sensor field is stored against the item."""
    sensor = SensorState(
        id="ABC",
        name="Hallway",
        presence=True,
        presence_updated=NOW - timedelta(minutes=5),
        temperature=20.5,
        temperature_updated=NOW - timedelta(minutes=1),
        battery=70,
    )

    written = await save_sensor_measurements(session, sensor, item.id)

    assert written == 3
    assert await count_measurements(session, item.id) == 3
    latest = await get_latest_measurement(session, item.id, "temperature")
    assert latest.value == 20.5
    assert latest.recorded_at == NOW - timedelta(minutes=1)


@pytest.mark.asyncio
async def test_sensor_without_fields_writes_nothing(session, item):
    assert await save_sensor_measurements(session, SensorState(id="empty"), item.id) == 0


@pytest.mark.asyncio
async def test_save_light_measurements(session, item):
    light = LightState(id="1", name="Ceiling", state=LightStateValues(on=False, bri=0))

    assert await save_light_measurements(session, light, item.id) == 2
    latest = await get_latest_measurement(session, item.id, "on")
    assert latest.value is False


def test_measurement_value_must_match_capability():
    with pytest.raises(ValidationError, match="battery expects a number"):
        MeasurementCreate(item_id="item-hall", capability="battery", value=True, recorded_at=NOW)


@pytest.mark.asyncio
async def test_measurements_range_and_order(session, item):
    """Test range filters and newest-first ordering."""
    await save_measurements_batch(
        session,
        [
            MeasurementCreate(
                item_id=item.id,
                capability="battery",
                value=100 - i,
                recorded_at=NOW - timedelta(hours=i),
            )
            for i in range(5)
        ],
    )

    recent = await get_measurements(session, item.id, start=NOW - timedelta(hours=2))
    assert [m.value for m in recent] == [100, 99, 98]

    limited = await get_measurements(session, item.id, capability="battery", limit=2)
    assert [m.value for m in limited] == [100, 99]

    assert await count_measurements(session, item.id, end=NOW - timedelta(hours=3)) == 2
    assert await get_latest_measurement(session, item.id, "presence") is None


@pytest.mark.asyncio
async def test_ingest_bridge_config(session):
    """Test one bridge fetch is stored as a single batch of readings."""
    config = BridgeConfig(
        rooms=[],
        sensors=[SensorState(id="ABC", name="Hallway", presence=False, battery=55)],
        lights=[LightState(id="1", name="Ceiling", state=LightStateValues(on=True))],
        switches=[],
        contact_sensors=[],
    )

    assert len(collect_readings(config, now=fixed_clock)) == 3

    written = await ingest_bridge_config(session, config, now=fixed_clock)

    assert written == 3
    result = await session.execute(select(SensorReading.capability).order_by(SensorReading.id))
    assert result.scalars().all() == ["presence", "battery", "on"]
