"""
Data access for capacity analysis.

Reads RFQs, capacity configuration and master data into immutable snapshot
records, and upserts the two capacity configuration tables.
"""

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rfq_capacity.models.capacity import LoadPerUnit, NominalCapacity
from rfq_capacity.models.master_data import (
    Division, ExistingProcess, Plant, Process, Site, Stakeholder
)
from rfq_capacity.models.rfq import RFQ
from rfq_capacity.services.capacity_planning.snapshot import (
    CapacityRow,
    DivisionRecord,
    LoadPerUnitRow,
    MasterDataSnapshot,
    PlanningMilestone,
    PlantProcessRecord,
    PlantRecord,
    ProcessRecord,
    RFQRecord,
    SiteRecord,
    StakeholderRecord,
    WorksharingLine,
)


def _status_value(status) -> str:
    return status.value if hasattr(status, "value") else str(status)


def to_rfq_record(rfq: RFQ) -> RFQRecord:
    """Convert an RFQ with loaded planning/worksharing into a record."""
    return RFQRecord(
        id=rfq.id,
        reference=rfq.reference,
        phase_status=_status_value(rfq.phase_status),
        total_qty_to_quote=rfq.total_qty_to_quote or 0,
        due_date=rfq.due_date,
        proposal_leader=rfq.proposal_leader,
        planning=tuple(
            PlanningMilestone(p.team, p.planned_date, p.actual_date)
            for p in rfq.planning
        ),
        worksharing=tuple(
            WorksharingLine(ws.process, ws.plant, ws.qty_to_quote or 0)
            for ws in rfq.worksharing
        ),
    )


class CapacityRepository:
    """
    Repository over one session.

    One instance per concurrent read: an AsyncSession must not be shared
    between concurrently running coroutines.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_rfqs(self) -> list[RFQRecord]:
        """All RFQs with their planning milestones and worksharing lines."""
        result = await self.session.execute(
            select(RFQ)
            .options(selectinload(RFQ.planning), selectinload(RFQ.worksharing))
            .order_by(RFQ.created_at.desc())
        )
        return [to_rfq_record(rfq) for rfq in result.scalars().all()]

    async def list_nominal_capacities(self) -> list[CapacityRow]:
        result = await self.session.execute(select(NominalCapacity))
        return [
            CapacityRow(row.process_id, row.plant_id, float(row.weekly_hours))
            for row in result.scalars().all()
        ]

    async def list_load_per_unit(self) -> list[LoadPerUnitRow]:
        result = await self.session.execute(select(LoadPerUnit))
        return [
            LoadPerUnitRow(row.process_id, row.plant_id, float(row.hours_per_unit))
            for row in result.scalars().all()
        ]

    async def get_master_data(self) -> MasterDataSnapshot:
        """Snapshot of the reference hierarchy, read in one session."""
        divisions = (await self.session.execute(
            select(Division).order_by(Division.name)
        )).scalars().all()
        sites = (await self.session.execute(
            select(Site).options(selectinload(Site.division)).order_by(Site.name)
        )).scalars().all()
        plants = (await self.session.execute(
            select(Plant).options(selectinload(Plant.site)).order_by(Plant.name)
        )).scalars().all()
        processes = (await self.session.execute(
            select(Process).order_by(Process.name)
        )).scalars().all()
        existing = (await self.session.execute(
            select(ExistingProcess).options(
                selectinload(ExistingProcess.process),
                selectinload(ExistingProcess.plant),
            )
        )).scalars().all()
        stakeholders = (await self.session.execute(
            select(Stakeholder).options(selectinload(Stakeholder.plant))
        )).scalars().all()

        return MasterDataSnapshot(
            divisions=tuple(
                DivisionRecord(d.id, d.name, d.abbreviation) for d in divisions
            ),
            sites=tuple(
                SiteRecord(s.id, s.name, s.division.name) for s in sites
            ),
            plants=tuple(
                PlantRecord(p.id, p.name, p.site.name) for p in plants
            ),
            processes=tuple(
                ProcessRecord(p.id, p.name, p.description) for p in processes
            ),
            existing_processes=tuple(
                PlantProcessRecord(ep.plant.name, ep.process.name)
                for ep in sorted(existing, key=lambda ep: (ep.plant.name, ep.process.name))
            ),
            stakeholders=tuple(
                StakeholderRecord(
                    name=s.name,
                    plant_name=s.plant.name if s.plant else None,
                    department=s.department,
                    role=s.role,
                )
                for s in stakeholders
            ),
        )

    async def save_nominal_capacity(
        self,
        process_id: str,
        plant_id: str,
        weekly_hours: float,
    ) -> tuple[CapacityRow, CapacityRow | None]:
        """
        Insert or update the nominal capacity of a (process, plant) pair.

        Returns:
            Stored row and the previous row, if any
        """
        if weekly_hours <= 0:
            raise ValueError(f"Weekly hours must be positive, got {weekly_hours}")
        await self._check_pair(process_id, plant_id)

        existing = (await self.session.execute(
            select(NominalCapacity).where(
                and_(
                    NominalCapacity.process_id == process_id,
                    NominalCapacity.plant_id == plant_id,
                )
            )
        )).scalar_one_or_none()

        previous = None
        if existing is None:
            self.session.add(
                NominalCapacity(process_id=process_id, plant_id=plant_id, weekly_hours=weekly_hours)
            )
        else:
            previous = CapacityRow(process_id, plant_id, float(existing.weekly_hours))
            existing.weekly_hours = weekly_hours

        await self.session.flush()
        return CapacityRow(process_id, plant_id, float(weekly_hours)), previous

    async def save_load_per_unit(
        self,
        process_id: str,
        plant_id: str,
        hours_per_unit: float,
    ) -> tuple[LoadPerUnitRow, LoadPerUnitRow | None]:
        """
        Insert or update the load per unit of a (process, plant) pair.

        Returns:
            Stored row and the previous row, if any
        """
        if hours_per_unit < 0:
            raise ValueError(f"Hours per unit cannot be negative, got {hours_per_unit}")
        await self._check_pair(process_id, plant_id)

        existing = (await self.session.execute(
            select(LoadPerUnit).where(
                and_(
                    LoadPerUnit.process_id == process_id,
                    LoadPerUnit.plant_id == plant_id,
                )
            )
        )).scalar_one_or_none()

        previous = None
        if existing is None:
            self.session.add(
                LoadPerUnit(process_id=process_id, plant_id=plant_id, hours_per_unit=hours_per_unit)
            )
        else:
            previous = LoadPerUnitRow(process_id, plant_id, float(existing.hours_per_unit))
            existing.hours_per_unit = hours_per_unit

        await self.session.flush()
        return LoadPerUnitRow(process_id, plant_id, float(hours_per_unit)), previous

    async def _check_pair(self, process_id: str, plant_id: str) -> None:
        if await self.session.get(Process, process_id) is None:
            raise ValueError(f"Process {process_id} not found")
        if await self.session.get(Plant, plant_id) is None:
            raise ValueError(f"Plant {plant_id} not found")
