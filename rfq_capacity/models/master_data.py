"""
Reference master data models.

Holds the organizational hierarchy (division > site > plant), the standard
process catalog, the processes available at each plant, and the stakeholders
who own proposals.
"""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rfq_capacity.database.base import Base


class Division(Base):
    """Top level of the organizational hierarchy."""

    __tablename__ = "division"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    abbreviation: Mapped[str | None] = mapped_column(String(20))

    sites: Mapped[list["Site"]] = relationship("Site", back_populates="division")


class Site(Base):
    """A geographic site belonging to exactly one division."""

    __tablename__ = "site"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    division_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("division.id", ondelete="RESTRICT"),
        nullable=False,
    )

    division: Mapped["Division"] = relationship("Division", back_populates="sites")
    plants: Mapped[list["Plant"]] = relationship("Plant", back_populates="site")


class Plant(Base):
    """A production plant belonging to exactly one site."""

    __tablename__ = "plant"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    site_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("site.id", ondelete="RESTRICT"),
        nullable=False,
    )

    site: Mapped["Site"] = relationship("Site", back_populates="plants")


class Process(Base):
    """Standard manufacturing or administrative process."""

    __tablename__ = "process"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text)


class ExistingProcess(Base):
    """
    Availability of a standard process at a plant.

    A plant only offers the processes listed here; the capacity view builds
    its rows from this join.
    """

    __tablename__ = "existing_process"

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

    process: Mapped["Process"] = relationship("Process")
    plant: Mapped["Plant"] = relationship("Plant")

    __table_args__ = (
        UniqueConstraint("process_id", "plant_id", name="uq_existing_process_pair"),
    )


class Stakeholder(Base):
    """Person involved in quoting, attached to a home plant."""

    __tablename__ = "stakeholder"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    department: Mapped[str | None] = mapped_column(String(100))
    role: Mapped[str | None] = mapped_column(String(100))
    plant_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("plant.id", ondelete="SET NULL"),
    )

    plant: Mapped["Plant"] = relationship("Plant")
