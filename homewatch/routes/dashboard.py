"""Dashboard API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from homewatch.database import get_db
from homewatch.schemas import DashboardResponse
from homewatch.services import get_dashboard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(session: AsyncSession = Depends(get_db)) -> DashboardResponse:
    """Get system status, today's timeline and the device overview."""
    try:
        return await get_dashboard(session)
    except SQLAlchemyError as e:
        logger.error(f"Dashboard fetch failed: {e}")
        raise HTTPException(status_code=503, detail="Data loading failed") from e
