"""
RFQ (request for quote) models.

An RFQ owns one planning row per stage and any number of worksharing lines
allocating its quantity to (process, plant) pairs.
"""

from datetime import date
from enum import Enum

from sqlalchemy import (
    Date, Enum as SQLEnum, ForeignKey, Integer, String, Text, UniqueConstraint
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rfq_capacity.database.base import Base


class PhaseStatus(str, Enum):
    """RFQ lifecycle status."""
    PROSPECT = "PROSPECT"
    PROPOSAL = "PROPOSAL"
    NEGOTIATION = "NEGOTIATION"
    LOST = "LOST"
    AWARDED = "AWARDED"
    STANDBY = "STANDBY"
    CANCELED = "CANCELED"
    CLOSED = "CLOSED"


class Team(str, Enum):
    """Planning stages, declared in timeline order."""
    BLU = "BLU"
    PIN = "PIN"
    EOQ = "EOQ"
    GRE = "GRE"
    RED = "RED"


class RFQ(Base):
    """A quotation request tracked through the planning stages."""

    __tablename__ = "rfq"

    reference: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    round: Mapped[str | None] = mapped_column(String(20))
    opportunity: Mapped[str | None] = mapped_column(String(255))
    customer: Mapped[str | None] = mapped_column(String(255))
    program: Mapped[str | None] = mapped_column(String(255))
    workpackage: Mapped[str | None] = mapped_column(Text)
    due_date: Mapped[date | None] = mapped_column(Date)
    internal_customer: Mapped[str | None] = mapped_column(String(255))
    proposal_leader: Mapped[str | None] = mapped_column(String(255))

    phase_status: Mapped[PhaseStatus] = mapped_column(
        SQLEnum(PhaseStatus),
        default=PhaseStatus.PROSPECT,
        index=True,
    )
    total_qty_to_quote: Mapped[int] = mapped_column(Integer, default=0)

    planning: Mapped[list["RFQPlanning"]] = relationship(
        "RFQPlanning",
        back_populates="rfq",
        cascade="all, delete-orphan",
    )
    worksharing: Mapped[list["RFQWorksharing"]] = relationship(
        "RFQWorksharing",
        back_populates="rfq",
        cascade="all, delete-orphan",
    )


class RFQPlanning(Base):
    """Planned and actual dates of one stage of an RFQ."""

    __tablename__ = "rfq_planning"

    rfq_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("rfq.id", ondelete="CASCADE"),
        nullable=False,
    )
    team: Mapped[Team] = mapped_column(SQLEnum(Team), nullable=False)
    planned_date: Mapped[date | None] = mapped_column(Date)
    actual_date: Mapped[date | None] = mapped_column(Date)

    rfq: Mapped["RFQ"] = relationship("RFQ", back_populates="planning")

    __table_args__ = (
        UniqueConstraint("rfq_id", "team", name="uq_rfq_planning_team"),
    )


class RFQWorksharing(Base):
    """Quantity of an RFQ allocated to a (process, plant) pair."""

    __tablename__ = "rfq_worksharing"

    rfq_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("rfq.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Stored by name, as entered on the quotation form
    process: Mapped[str] = mapped_column(String(100), nullable=False)
    plant: Mapped[str] = mapped_column(String(100), nullable=False)
    qty_to_quote: Mapped[int] = mapped_column(Integer, default=0)

    rfq: Mapped["RFQ"] = relationship("RFQ", back_populates="worksharing")
