"""Shared schema types."""

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator

Scalar = bool | int | float | str


def to_naive_utc(value: datetime) -> datetime:
    """Normalize to naive UTC, the form stored in SQLite."""
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


UtcDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]
