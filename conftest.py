"""
Shared fixtures for the RFQ Capacity Planner tests.
"""

from datetime import date

import pytest

from rfq_capacity.models.rfq import Team
from rfq_capacity.services.capacity_planning.policy import CapacityPolicy
from rfq_capacity.services.capacity_planning.reference import ReferenceResolver
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


@pytest.fixture
def master_data():
    """Two divisions, one site each, plus a plant whose site is missing."""
    return MasterDataSnapshot(
        divisions=(
            DivisionRecord('div1', 'DIV1'),
            DivisionRecord('div2', 'DIV2'),
        ),
        sites=(
            SiteRecord('site1', 'Site1', 'DIV1'),
            SiteRecord('site2', 'Site2', 'DIV2'),
        ),
        plants=(
            PlantRecord('plant1', 'Plant1', 'Site1'),
            PlantRecord('plant2', 'Plant2', 'Site1'),
            PlantRecord('plant3', 'Plant3', 'Site2'),
            PlantRecord('plantx', 'PlantX', 'Demolished'),
        ),
        processes=(
            ProcessRecord('proc1', 'Proc1'),
            ProcessRecord('proc2', 'Proc2'),
        ),
        existing_processes=(
            PlantProcessRecord('Plant1', 'Proc1'),
            PlantProcessRecord('Plant1', 'Proc2'),
            PlantProcessRecord('Plant2', 'Proc1'),
            PlantProcessRecord('Plant3', 'Proc1'),
        ),
        stakeholders=(
            StakeholderRecord('Alice', plant_name='Plant1'),
            StakeholderRecord('Bob', plant_name='Plant3'),
            StakeholderRecord('Carol'),
        ),
    )


@pytest.fixture
def capacity_rows():
    return [CapacityRow('proc1', 'plant1', 120.0)]


@pytest.fixture
def load_rows():
    return [
        LoadPerUnitRow('proc1', 'plant1', 1.0),
        LoadPerUnitRow('proc1', 'plant2', 0.5),
        LoadPerUnitRow('proc1', 'plant3', 2.0),
    ]


@pytest.fixture
def policy():
    return CapacityPolicy()


@pytest.fixture
def resolver(master_data, capacity_rows, load_rows, policy):
    return ReferenceResolver.from_rows(master_data, capacity_rows, load_rows, policy)


@pytest.fixture
def make_rfq():
    """Factory for RFQ records; planning given as {team: planned_date}."""

    def _make_rfq(
        reference='RFQ1',
        planning=None,
        lines=(),
        status='PROPOSAL',
        total_qty=0,
        proposal_leader=None,
    ):
        milestones = tuple(
            PlanningMilestone(Team(team), planned)
            for team, planned in (planning or {}).items()
        )
        return RFQRecord(
            id=f'id-{reference}',
            reference=reference,
            phase_status=status,
            total_qty_to_quote=total_qty,
            proposal_leader=proposal_leader,
            planning=milestones,
            worksharing=tuple(WorksharingLine(*line) for line in lines),
        )

    return _make_rfq


@pytest.fixture
def boundary_rfq(make_rfq):
    """PIN on a Tuesday, EOQ on the following Monday: a 6-day window."""
    return make_rfq(
        planning={'PIN': date(2024, 1, 2), 'EOQ': date(2024, 1, 8)},
        lines=[('Proc1', 'Plant1', 10)],
    )
