"""Tests for reading, stats and dashboard API endpoints."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from homewatch.database import get_db
from homewatch.main import app


def _now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def _payload(device_id: str, capability: str, value, recorded_at: datetime) -> dict:
    return {
        "deviceId": device_id,
        "deviceName": "Front door" if capability == "contact" else "Hallway",
        "capability": capability,
        "value": value,
        "recordedAt": recorded_at.isoformat(),
    }


# --- Readings endpoint tests ---


@pytest.mark.asyncio
async def test_post_and_list_readings(client: AsyncClient):
    """Test posted readings come back newest first in camelCase."""
    now = _now()
    response = await client.post(
        "/api/readings",
        json=[
            _payload("hall", "presence", True, now - timedelta(minutes=2)),
            _payload("hall", "battery", 80, now - timedelta(minutes=1)),
        ],
    )
    assert response.status_code == 200
    assert response.json() == {"written": 2}

    response = await client.get("/api/readings", params={"device_id": "hall"})
    assert response.status_code == 200

    readings = response.json()
    assert [r["capability"] for r in readings] == ["battery", "presence"]
    assert readings[0]["deviceId"] == "hall"
    assert readings[0]["value"] == 80
    assert "recordedAt" in readings[0]


@pytest.mark.asyncio
async def test_post_rejects_unknown_capability(client: AsyncClient):
    response = await client.post(
        "/api/readings",
        json=[_payload("hall", "humidity", 40, _now())],
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_post_rejects_wrong_value_type(client: AsyncClient):
    """Test a boolean temperature is refused and nothing is stored."""
    response = await client.post(
        "/api/readings",
        json=[
            _payload("hall", "presence", True, _now()),
            _payload("hall", "temperature", True, _now()),
        ],
    )
    assert response.status_code == 422

    response = await client.get("/api/readings")
    assert response.json() == []


@pytest.mark.asyncio
async def test_list_readings_limit_bounds(client: AsyncClient):
    response = await client.get("/api/readings", params={"limit": 0})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_old_readings(client: AsyncClient):
    now = _now()
    await client.post(
        "/api/readings",
        json=[
            _payload("hall", "motion", True, now - timedelta(days=45)),
            _payload("hall", "motion", True, now - timedelta(days=1)),
        ],
    )

    response = await client.delete("/api/readings", params={"days_to_keep": 30})

    assert response.status_code == 200
    assert response.json() == {"deleted": 1}


# --- Active readings (scan) endpoint tests ---


@pytest.mark.asyncio
async def test_active_readings_count_door_openings(client: AsyncClient):
    """Test the scan endpoint counts door openings, not open samples."""
    now = _now()
    values = [False, True, True, False, True]
    await client.post(
        "/api/readings",
        json=[
            _payload("door", "contact", v, now - timedelta(minutes=10 - i))
            for i, v in enumerate(values)
        ],
    )

    response = await client.get("/api/readings/active")

    assert response.status_code == 200
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_active_readings_validates_range(client: AsyncClient):
    end = _now()
    response = await client.get(
        "/api/readings/active",
        params={"start": end.isoformat(), "end": (end - timedelta(hours=1)).isoformat()},
    )
    assert response.status_code == 400

    response = await client.get(
        "/api/readings/active",
        params={"start": (end - timedelta(days=40)).isoformat(), "end": end.isoformat()},
    )
    assert response.status_code == 400


# --- Stats endpoint tests ---


@pytest.mark.asyncio
async def test_stats_numeric(client: AsyncClient):
    now = _now()
    await client.post(
        "/api/readings",
        json=[
            _payload("hall", "temperature", v, now - timedelta(hours=i + 1))
            for i, v in enumerate([1, 5, 3])
        ],
    )

    response = await client.get("/api/devices/hall/stats", params={"capability": "temperature"})

    assert response.status_code == 200
    stats = response.json()
    assert stats["count"] == 3
    assert stats["min"] == 1
    assert stats["max"] == 5
    assert stats["avg"] == 3
    assert stats["windowDays"] == 7


@pytest.mark.asyncio
async def test_stats_boolean_omits_aggregates(client: AsyncClient):
    """Test min/max/avg keys are absent for boolean capabilities."""
    now = _now()
    await client.post(
        "/api/readings",
        json=[_payload("hall", "presence", True, now - timedelta(hours=1))],
    )

    response = await client.get("/api/devices/hall/stats", params={"capability": "presence"})

    stats = response.json()
    assert stats["count"] == 1
    assert "min" not in stats
    assert "max" not in stats
    assert "avg" not in stats


# --- Dashboard endpoint tests ---


@pytest.mark.asyncio
async def test_dashboard_response_structure(client: AsyncClient):
    await client.post(
        "/api/readings",
        json=[_payload("hall", "presence", True, _now() - timedelta(minutes=5))],
    )

    response = await client.get("/api/dashboard")
    assert response.status_code == 200

    data = response.json()
    assert data["status"]["level"] == "normal"
    assert data["status"]["lastActivityLocation"] == "Hallway"
    assert isinstance(data["timeline"], list)
    assert data["devices"][0]["id"] == "hall"
    assert data["devices"][0]["online"] is True


@pytest.mark.asyncio
async def test_dashboard_without_sensors(client: AsyncClient):
    response = await client.get("/api/dashboard")

    assert response.status_code == 200
    assert response.json()["status"]["message"] == "No sensors connected"


# --- Storage failure tests ---


@pytest.fixture
async def broken_client(client: AsyncClient):
    """Client whose database session fails every statement."""

    async def failing_get_db():
        session = AsyncMock(spec=AsyncSession)
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("unavailable"))
        yield session

    app.dependency_overrides[get_db] = failing_get_db
    yield client


@pytest.mark.asyncio
async def test_read_failure_surfaces_as_503(broken_client: AsyncClient):
    """Test read-path storage failures report data loading failed."""
    for path in ("/api/readings", "/api/readings/active", "/api/dashboard"):
        response = await broken_client.get(path)
        assert response.status_code == 503
        assert response.json()["detail"] == "Data loading failed"


@pytest.mark.asyncio
async def test_write_failure_reports_zero(broken_client: AsyncClient):
    """Test write-path storage failures are invisible apart from the count."""
    response = await broken_client.post(
        "/api/readings",
        json=[_payload("hall", "motion", True, _now())],
    )

    assert response.status_code == 200
    assert response.json() == {"written": 0}


@pytest.mark.asyncio
async def test_delete_failure_surfaces_as_503(broken_client: AsyncClient):
    response = await broken_client.delete("/api/readings", params={"days_to_keep": 30})

    assert response.status_code == 503
    assert response.json()["detail"] == "Deleting readings failed"
