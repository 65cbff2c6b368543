"""Measurement model (raw capability values per managed item)."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from homewatch.database import Base


class Measurement(Base):
    """One capability value of a managed item. Insert-only."""

    __tablename__ = "measurements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[str] = mapped_column(String(50), ForeignKey("items.id"), nullable=False)
    capability: Mapped[str] = mapped_column(String(32), nullable=False)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    item: Mapped["Item"] = relationship(back_populates="measurements")

    __table_args__ = (
        Index("ix_measurements_item_capability_time", "item_id", "capability", "recorded_at"),
    )


# Import here to avoid circular imports
from homewatch.models.item import Item  # noqa: E402, F401
