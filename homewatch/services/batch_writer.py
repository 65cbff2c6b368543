"""Batch writer — one bulk insert per call, best effort."""

import logging
from typing import Any

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

__all__ = ["write_batch"]


async def write_batch(
    session: AsyncSession,
    model: type,
    rows: list[dict[str, Any]],
    *,
    label: str = "batch",
) -> int:
    """
    Insert all rows in a single statement and commit.

    Returns the number of rows written. A storage failure is logged together
    with the rows that were lost and reported as 0; it is never raised and
    never retried, so a polling loop survives a backend outage. An empty
    input also returns 0, so callers tell the two apart by the input length.
    """
    if not rows:
        return 0

    try:
        await session.execute(insert(model), rows)
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Error saving {label} into {model.__tablename__}: {e}")
        logger.error(f"Rows that failed ({len(rows)}): {rows}")
        return 0

    logger.info(f"Saved {len(rows)} rows ({label}) into {model.__tablename__}")
    return len(rows)
