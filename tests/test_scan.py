"""Tests for the paginated transition-aware scan."""

from datetime import datetime, timedelta

import pytest

from homewatch.services import readings_service
from homewatch.services.readings_service import (
    get_all_active_readings,
    is_active,
    scan_active_readings,
)

T0 = datetime(2026, 10, 19, 8, 0, 0)
RANGE_START = T0 - timedelta(hours=1)
RANGE_END = T0 + timedelta(days=1)


def _series(device_id: str, capability: str, values: list, step_seconds: int = 60):
    return [
        (device_id, capability, value, T0 + timedelta(seconds=i * step_seconds))
        for i, value in enumerate(values)
    ]


class TestTriggerSemantics:
    """Edge- vs level-triggered classification."""

    @pytest.mark.asyncio
    async def test_door_counts_only_openings(self, session, add_readings):
        """Test false, true, true, false, true yields exactly two door events."""
        await add_readings(_series("door-1", "contact", [False, True, True, False, True]))

        events = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert len(events) == 2
        assert [e.recorded_at for e in events] == [
            T0 + timedelta(seconds=60),
            T0 + timedelta(seconds=240),
        ]

    @pytest.mark.asyncio
    async def test_door_open_at_scan_start_counts_once(self, session, add_readings):
        """Test a door already open on its first reading is one event."""
        await add_readings(_series("door-1", "contact", [True, True, True]))

        events = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert len(events) == 1

    @pytest.mark.asyncio
    async def test_motion_counts_every_true(self, session, add_readings):
        """Test true, true, false, true yields three motion events."""
        await add_readings(_series("hall", "motion", [True, True, False, True]))

        events = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert len(events) == 3
        assert all(e.value is True for e in events)

    @pytest.mark.asyncio
    async def test_state_is_tracked_per_device(self, session, add_readings):
        """Test two doors interleaved keep independent transition state."""
        rows = [
            ("door-a", "contact", True, T0),
            ("door-b", "contact", True, T0 + timedelta(seconds=1)),
            ("door-a", "contact", True, T0 + timedelta(seconds=2)),
            ("door-b", "contact", False, T0 + timedelta(seconds=3)),
            ("door-b", "contact", True, T0 + timedelta(seconds=4)),
        ]
        await add_readings(rows)

        events = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert [(e.device_id, e.recorded_at) for e in events] == [
            ("door-a", T0),
            ("door-b", T0 + timedelta(seconds=1)),
            ("door-b", T0 + timedelta(seconds=4)),
        ]

    @pytest.mark.asyncio
    async def test_numeric_readings_are_never_events(self, session, add_readings):
        """Test temperature and battery values are not activations."""
        await add_readings(
            [
                ("hall", "temperature", 1, T0),
                ("hall", "battery", 100, T0 + timedelta(seconds=1)),
                ("hall", "presence", True, T0 + timedelta(seconds=2)),
            ]
        )

        events = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert [e.capability for e in events] == ["presence"]

    @pytest.mark.asyncio
    async def test_range_is_inclusive(self, session, add_readings):
        """Test readings exactly on both bounds are included."""
        await add_readings(_series("hall", "motion", [True, True, True], step_seconds=3600))

        events = await get_all_active_readings(session, T0, T0 + timedelta(hours=2))

        assert len(events) == 3


class TestMalformedValues:
    """A bad stored value never aborts the scan."""

    @pytest.mark.asyncio
    async def test_unparsable_value_is_inactive(self, session, add_raw_reading, add_readings):
        """Test a malformed row is skipped and the scan continues."""
        await add_raw_reading("hall", "motion", "{not json", T0)
        await add_readings([("hall", "motion", True, T0 + timedelta(seconds=1))])

        events = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert len(events) == 1

    @pytest.mark.asyncio
    async def test_malformed_value_resets_door_state(self, session, add_raw_reading, add_readings):
        """Test an unreadable door value counts as not open for transitions."""
        await add_readings([("door-1", "contact", True, T0)])
        await add_raw_reading("door-1", "contact", "garbage", T0 + timedelta(seconds=1))
        await add_readings([("door-1", "contact", True, T0 + timedelta(seconds=2))])

        events = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert len(events) == 2

    def test_is_active_forms(self):
        assert is_active("true") is True
        assert is_active(True) is True
        assert is_active("false") is False
        assert is_active("1") is False
        assert is_active("{broken") is False
        assert is_active(None) is False


class TestPagination:
    """Cursor handling across page boundaries."""

    @pytest.mark.asyncio
    async def test_more_rows_than_one_page(self, session, add_readings):
        """Test 2500 distinct-timestamp motion readings are all scanned once."""
        rows = _series("hall", "motion", [i % 5 != 0 for i in range(2500)], step_seconds=1)
        await add_readings(rows)

        events = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert len(events) == 2000
        assert len({e.id for e in events}) == 2000

    @pytest.mark.asyncio
    async def test_shared_timestamp_on_page_boundary(self, session, add_readings, monkeypatch):
        """Test rows sharing a timestamp across a page boundary are neither lost nor repeated."""
        monkeypatch.setattr(readings_service, "SCAN_PAGE_SIZE", 3)
        rows = [(f"sensor-{i}", "motion", True, T0) for i in range(7)]
        rows.append(("sensor-x", "motion", True, T0 + timedelta(seconds=1)))
        await add_readings(rows)

        events = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert len(events) == 8
        assert len({e.id for e in events}) == 8

    @pytest.mark.asyncio
    async def test_door_state_carries_across_pages(self, session, add_readings, monkeypatch):
        """Test a door open on both sides of a page boundary counts once."""
        monkeypatch.setattr(readings_service, "SCAN_PAGE_SIZE", 2)
        await add_readings(_series("door-1", "contact", [False, True, True, True, False, True]))

        events = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert len(events) == 2

    @pytest.mark.asyncio
    async def test_exact_multiple_of_page_size(self, session, add_readings, monkeypatch):
        """Test a final full page is followed by an empty page and the scan ends."""
        monkeypatch.setattr(readings_service, "SCAN_PAGE_SIZE", 2)
        await add_readings(_series("hall", "motion", [True, True, True, True]))

        events = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert len(events) == 4

    @pytest.mark.asyncio
    async def test_empty_range(self, session):
        assert await get_all_active_readings(session, RANGE_START, RANGE_END) == []

    @pytest.mark.asyncio
    async def test_scan_is_lazy_and_ordered(self, session, add_readings):
        """Test the generator yields events in timestamp order."""
        await add_readings(
            [
                ("b", "motion", True, T0 + timedelta(seconds=5)),
                ("a", "motion", True, T0),
            ]
        )

        seen = [e.device_id async for e in scan_active_readings(session, RANGE_START, RANGE_END)]

        assert seen == ["a", "b"]

    @pytest.mark.asyncio
    async def test_scans_do_not_share_state(self, session, add_readings):
        """Test a second scan starts with fresh transition state."""
        await add_readings([("door-1", "contact", True, T0)])

        first = await get_all_active_readings(session, RANGE_START, RANGE_END)
        second = await get_all_active_readings(session, RANGE_START, RANGE_END)

        assert len(first) == len(second) == 1
