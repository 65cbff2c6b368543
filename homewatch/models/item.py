"""Managed item model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from homewatch.database import Base


class Item(Base):
    """A managed sensor, lamp or switch known to the household."""

    __tablename__ = "items"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    external_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    item_type: Mapped[str] = mapped_column(String(50), nullable=False)
    room: Mapped[str | None] = mapped_column(String(100), nullable=True)

    measurements: Mapped[list["Measurement"]] = relationship(back_populates="item")


# Import here to avoid circular imports
from homewatch.models.measurement import Measurement  # noqa: E402, F401
