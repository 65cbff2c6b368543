"""Shared fixtures: a throwaway SQLite database per test."""

from collections.abc import Callable
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from homewatch.database import Base, get_db
from homewatch.main import app
from homewatch.models import SensorReading
from homewatch.schemas import ReadingCreate
from homewatch.services.readings_service import save_batch


@pytest.fixture
async def engine(tmp_path):
    """Create a file-backed SQLite engine with all tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """Create test client bound to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def add_readings(session) -> Callable:
    """Insert (device_id, capability, value, recorded_at) tuples in order."""

    async def _add(rows: list[tuple[str, str, object, datetime]], device_name: str | None = None):
        readings = [
            ReadingCreate(
                device_id=device_id,
                device_name=device_name,
                capability=capability,
                value=value,
                recorded_at=recorded_at,
            )
            for device_id, capability, value, recorded_at in rows
        ]
        written = await save_batch(session, readings)
        assert written == len(readings)

    return _add


@pytest.fixture
def add_raw_reading(session) -> Callable:
    """Insert a row with an arbitrary stored value string."""

    async def _add(device_id: str, capability: str, raw_value: str, recorded_at: datetime):
        session.add(
            SensorReading(
                device_id=device_id,
                capability=capability,
                value=raw_value,
                recorded_at=recorded_at,
            )
        )
        await session.commit()

    return _add
