"""Reading API routes."""

import logging
from datetime import UTC, datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from homewatch.capabilities import Capability
from homewatch.database import get_db
from homewatch.schemas import CapabilityStats, DeleteResult, ReadingCreate, ReadingOut, WriteResult
from homewatch.schemas.common import to_naive_utc
from homewatch.services import (
    delete_old_readings,
    get_all_active_readings,
    get_capability_stats,
    get_readings,
    save_batch,
)

logger = logging.getLogger(__name__)

# Time range and result limits
MAX_SCAN_DAYS = 31
DEFAULT_LIMIT = 100
MAX_LIMIT = 1000
MAX_STATS_DAYS = 90

LOAD_FAILED = "Data loading failed"

router = APIRouter(prefix="/api", tags=["readings"])


@router.get("/readings", response_model=list[ReadingOut])
async def list_readings(
    device_id: str | None = Query(None, description="Filter by device"),
    capability: Capability | None = Query(None, description="Filter by capability"),
    start: datetime | None = Query(None, description="Start of time range (ISO format)"),
    end: datetime | None = Query(None, description="End of time range (ISO format)"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT, description="Max readings to return"),
    session: AsyncSession = Depends(get_db),
) -> list[ReadingOut]:
    """Get readings newest first."""
    start = to_naive_utc(start) if start else None
    end = to_naive_utc(end) if end else None
    try:
        return await get_readings(session, device_id, capability, start, end, limit)
    except SQLAlchemyError as e:
        logger.error(f"Readings query failed: {e}")
        raise HTTPException(status_code=503, detail=LOAD_FAILED) from e


@router.post("/readings", response_model=WriteResult)
async def create_readings(
    readings: list[ReadingCreate],
    session: AsyncSession = Depends(get_db),
) -> WriteResult:
    """Store a batch of readings. Storage failures report 0 written."""
    return WriteResult(written=await save_batch(session, readings))


@router.delete("/readings", response_model=DeleteResult)
async def prune_readings(
    days_to_keep: int = Query(30, ge=1, description="Keep readings newer than this many days"),
    session: AsyncSession = Depends(get_db),
) -> DeleteResult:
    """Delete readings past the retention window."""
    try:
        return DeleteResult(deleted=await delete_old_readings(session, days_to_keep))
    except SQLAlchemyError as e:
        logger.error(f"Retention delete failed: {e}")
        raise HTTPException(status_code=503, detail="Deleting readings failed") from e


@router.get("/readings/active", response_model=list[ReadingOut])
async def list_active_readings(
    start: datetime | None = Query(None, description="Start of time range (ISO format)"),
    end: datetime | None = Query(None, description="End of time range (ISO format)"),
    session: AsyncSession = Depends(get_db),
) -> list[ReadingOut]:
    """Get activation events (motion, door openings, ...) in a time range."""
    # Default to last 24 hours if not specified
    now = datetime.now(UTC).replace(tzinfo=None)  # Use naive UTC for SQLite
    if end is None:
        end = now
    end = to_naive_utc(end)
    if start is None:
        start = end - timedelta(hours=24)
    start = to_naive_utc(start)

    if start >= end:
        raise HTTPException(status_code=400, detail="start must be before end")

    if end - start > timedelta(days=MAX_SCAN_DAYS):
        raise HTTPException(
            status_code=400,
            detail=f"Time range cannot exceed {MAX_SCAN_DAYS} days",
        )

    try:
        return await get_all_active_readings(session, start, end)
    except SQLAlchemyError as e:
        logger.error(f"Active readings scan failed: {e}")
        raise HTTPException(status_code=503, detail=LOAD_FAILED) from e


@router.get(
    "/devices/{device_id}/stats",
    response_model=CapabilityStats,
    response_model_exclude_none=True,
)
async def get_device_stats(
    device_id: str,
    capability: Capability = Query(..., description="Capability to aggregate"),
    days: int = Query(7, ge=1, le=MAX_STATS_DAYS, description="Look-back window in days"),
    session: AsyncSession = Depends(get_db),
) -> CapabilityStats:
    """Get count/min/max/avg for one device capability."""
    try:
        return await get_capability_stats(session, device_id, capability, days)
    except SQLAlchemyError as e:
        logger.error(f"Stats query failed: {e}")
        raise HTTPException(status_code=503, detail=LOAD_FAILED) from e
