"""
Capacity configuration models.

Both tables are sparse and keyed by (process, plant): a missing row means
"use the default", which the reference resolver applies.
"""

from sqlalchemy import ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from rfq_capacity.database.base import Base


class NominalCapacity(Base):
    """Weekly hours a (process, plant) pair can absorb."""

    __tablename__ = "nominal_capacity"

    process_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("process.id", ondelete="CASCADE"),
        nullable=False,
    )
    plant_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("plant.id", ondelete="CASCADE"),
        nullable=False,
    )
    weekly_hours: Mapped[float] = mapped_column(Numeric(10, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint("process_id", "plant_id", name="uq_nominal_capacity_pair"),
    )


class LoadPerUnit(Base):
    """Hours needed to process one unit at a (process, plant) pair."""

    __tablename__ = "load_per_unit"

    process_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("process.id", ondelete="CASCADE"),
        nullable=False,
    )
    plant_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("plant.id", ondelete="CASCADE"),
        nullable=False,
    )
    hours_per_unit: Mapped[float] = mapped_column(Numeric(10, 4), nullable=False)

    __table_args__ = (
        UniqueConstraint("process_id", "plant_id", name="uq_load_per_unit_pair"),
    )
