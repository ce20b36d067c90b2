"""
Capacity load matrix and week drill-down.

Builds the plant/process rows of a division, the per-week utilization cells
with their trailing average, and the detail view of a single cell.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Sequence

from rfq_capacity.services.capacity_planning.policy import (
    CORPORATE_STEP_NAMES,
    CapacityPolicy,
    DEFAULT_POLICY,
)
from rfq_capacity.services.capacity_planning.reference import (
    ReferenceResolver,
    plant_process_key,
)
from rfq_capacity.services.capacity_planning.utilization import (
    LoadBand,
    bar_width,
    classify_utilization,
    trailing_average,
    utilization,
)
from rfq_capacity.services.capacity_planning.week_grid import LoadDetail, WeekBucket


@dataclass(frozen=True)
class PlantProcessRow:
    plant: str
    process: str
    capacity: float

    @property
    def key(self) -> str:
        return plant_process_key(self.plant, self.process)


@dataclass(frozen=True)
class PlantRows:
    plant: str
    processes: tuple[PlantProcessRow, ...] = ()


@dataclass(frozen=True)
class CellUtilization:
    hours: float
    utilization_pct: float
    band: LoadBand
    bar_width: float


@dataclass(frozen=True)
class LoadMatrixRow:
    plant: str
    process: str
    capacity: float
    cells: tuple[CellUtilization, ...]
    average: CellUtilization

    @property
    def key(self) -> str:
        return plant_process_key(self.plant, self.process)


@dataclass(frozen=True)
class LoadMatrix:
    """Week headers plus one row per loaded plant/process."""
    division: str
    weeks: tuple[WeekBucket, ...]
    rows: tuple[LoadMatrixRow, ...] = ()
    window_size: int = 7


@dataclass(frozen=True)
class DrilldownDetail:
    rfq_reference: str
    planning_step: str
    hours: float
    share_pct: float


@dataclass(frozen=True)
class WeekDrilldown:
    week_number: int
    week_year: int
    start_date: date
    end_date: date
    plant: str
    process: str
    total_hours: float
    capacity: float
    utilization_pct: float
    band: LoadBand
    details: tuple[DrilldownDetail, ...] = field(default_factory=tuple)


def build_plant_process_rows(
    resolver: ReferenceResolver,
    division: str,
    policy: CapacityPolicy = DEFAULT_POLICY,
) -> list[PlantRows]:
    """
    Rows of the capacity view for a division.

    The division's corporate cost center comes first with its administrative
    steps, followed by each plant of the division and its available processes.
    """
    corporate = resolver.corporate_plant_name(division)
    rows = [
        PlantRows(
            plant=corporate,
            processes=tuple(
                PlantProcessRow(corporate, step, policy.corporate_weekly_capacity)
                for step in CORPORATE_STEP_NAMES
            ),
        )
    ]

    for plant in resolver.plants_in_division(division):
        rows.append(
            PlantRows(
                plant=plant.name,
                processes=tuple(
                    PlantProcessRow(plant.name, process, resolver.capacity_for(plant.name, process))
                    for process in resolver.processes_for_plant(plant.name)
                ),
            )
        )
    return rows


def rows_with_load(
    rows: Sequence[PlantRows],
    weeks: Sequence[WeekBucket],
) -> list[PlantRows]:
    """Keep processes loaded in at least one week; drop plants left empty."""
    kept = []
    for plant_rows in rows:
        loaded = tuple(
            row for row in plant_rows.processes
            if any(week.hours(row.key) > 0 for week in weeks)
        )
        if loaded:
            kept.append(PlantRows(plant_rows.plant, loaded))
    return kept


def _cell(hours: float, capacity: float, policy: CapacityPolicy) -> CellUtilization:
    pct = utilization(hours, capacity)
    return CellUtilization(
        hours=hours,
        utilization_pct=pct,
        band=classify_utilization(pct, policy),
        bar_width=bar_width(pct),
    )


def build_load_matrix(
    division: str,
    weeks: Sequence[WeekBucket],
    rows: Sequence[PlantRows],
    policy: CapacityPolicy = DEFAULT_POLICY,
) -> LoadMatrix:
    """Utilization of every row in every week plus its trailing average."""
    window = policy.average_window_weeks
    matrix_rows = []
    for plant_rows in rows:
        for row in plant_rows.processes:
            cells = tuple(_cell(week.hours(row.key), row.capacity, policy) for week in weeks)
            average = _cell(trailing_average(weeks, row.key, window), row.capacity, policy)
            matrix_rows.append(
                LoadMatrixRow(
                    plant=row.plant,
                    process=row.process,
                    capacity=row.capacity,
                    cells=cells,
                    average=average,
                )
            )

    return LoadMatrix(
        division=division,
        weeks=tuple(weeks),
        rows=tuple(matrix_rows),
        window_size=window,
    )


def week_drilldown(
    week: WeekBucket,
    plant: str,
    process: str,
    capacity: float,
    policy: CapacityPolicy = DEFAULT_POLICY,
) -> WeekDrilldown:
    """Contributions to one cell of one week, largest first."""
    key = plant_process_key(plant, process)
    cell = week.loads.get(key)
    details: list[LoadDetail] = cell.details if cell else []
    total = cell.total if cell else 0.0
    pct = utilization(total, capacity)

    return WeekDrilldown(
        week_number=week.week_number,
        week_year=week.week_year,
        start_date=week.start_date,
        end_date=week.end_date,
        plant=plant,
        process=process,
        total_hours=total,
        capacity=capacity,
        utilization_pct=pct,
        band=classify_utilization(pct, policy),
        details=tuple(
            DrilldownDetail(
                rfq_reference=detail.rfq_reference,
                planning_step=detail.planning_step,
                hours=detail.hours,
                share_pct=utilization(detail.hours, capacity),
            )
            for detail in sorted(details, key=lambda d: d.hours, reverse=True)
        ),
    )
