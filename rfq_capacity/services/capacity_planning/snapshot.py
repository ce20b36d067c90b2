"""
Immutable records consumed by the capacity computations.

The repository converts ORM rows into these records once per computation
pass, so the projector and the flattener never touch a database session.
"""

from dataclasses import dataclass, field
from datetime import date

from rfq_capacity.models.rfq import Team


@dataclass(frozen=True)
class PlanningMilestone:
    """Planned/actual dates of one RFQ stage."""
    team: Team
    planned_date: date | None = None
    actual_date: date | None = None


@dataclass(frozen=True)
class WorksharingLine:
    """Quantity allocated to a (process, plant) pair."""
    process: str
    plant: str
    qty_to_quote: int


@dataclass(frozen=True)
class RFQRecord:
    """An RFQ with its milestones and worksharing lines."""
    id: str
    reference: str
    phase_status: str
    total_qty_to_quote: int = 0
    due_date: date | None = None
    proposal_leader: str | None = None
    planning: tuple[PlanningMilestone, ...] = ()
    worksharing: tuple[WorksharingLine, ...] = ()

    def planned_date(self, team: Team) -> date | None:
        """Planned date of the given stage, or None when unset or missing."""
        for milestone in self.planning:
            if milestone.team == team:
                return milestone.planned_date
        return None


@dataclass(frozen=True)
class DivisionRecord:
    id: str
    name: str
    abbreviation: str | None = None


@dataclass(frozen=True)
class SiteRecord:
    id: str
    name: str
    division_name: str


@dataclass(frozen=True)
class PlantRecord:
    id: str
    name: str
    site_name: str


@dataclass(frozen=True)
class ProcessRecord:
    id: str
    name: str
    description: str | None = None


@dataclass(frozen=True)
class PlantProcessRecord:
    """A process available at a plant."""
    plant_name: str
    process_name: str


@dataclass(frozen=True)
class StakeholderRecord:
    name: str
    plant_name: str | None = None
    department: str | None = None
    role: str | None = None


@dataclass(frozen=True)
class MasterDataSnapshot:
    """
    Consistent snapshot of the reference hierarchy.

    Treated as read-only for the duration of one computation pass.
    """
    divisions: tuple[DivisionRecord, ...] = ()
    sites: tuple[SiteRecord, ...] = ()
    plants: tuple[PlantRecord, ...] = ()
    processes: tuple[ProcessRecord, ...] = ()
    existing_processes: tuple[PlantProcessRecord, ...] = ()
    stakeholders: tuple[StakeholderRecord, ...] = ()


@dataclass(frozen=True)
class CapacityRow:
    """Nominal capacity entry as stored (ids, not names)."""
    process_id: str
    plant_id: str
    weekly_hours: float


@dataclass(frozen=True)
class LoadPerUnitRow:
    """Load-per-unit entry as stored (ids, not names)."""
    process_id: str
    plant_id: str
    hours_per_unit: float


@dataclass(frozen=True)
class LoadInputs:
    """Everything one computation pass needs, fetched together."""
    rfqs: tuple[RFQRecord, ...]
    capacities: tuple[CapacityRow, ...]
    loads_per_unit: tuple[LoadPerUnitRow, ...]
    master_data: MasterDataSnapshot = field(default_factory=MasterDataSnapshot)
