"""
Capacity load service.

Entry point of the capacity analysis: fetches RFQs, capacity configuration
and master data concurrently, then runs the pure computations over the
fetched snapshot. Every call is a fresh pass; nothing is cached between calls.
"""

import asyncio
import time
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Sequence, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rfq_capacity.config.settings import settings
from rfq_capacity.database.base import async_session_factory
from rfq_capacity.services.capacity_planning.analysis import (
    LoadMatrix,
    WeekDrilldown,
    build_load_matrix,
    build_plant_process_rows,
    rows_with_load,
    week_drilldown,
)
from rfq_capacity.services.capacity_planning.load_table import (
    LoadTableRow,
    SortKey,
    flatten_load_table,
    sort_load_table,
)
from rfq_capacity.services.capacity_planning.policy import CapacityPolicy
from rfq_capacity.services.capacity_planning.projector import (
    count_unresolved_lines,
    project_weekly_load,
)
from rfq_capacity.services.capacity_planning.reference import ReferenceResolver
from rfq_capacity.services.capacity_planning.repository import CapacityRepository
from rfq_capacity.services.capacity_planning.snapshot import (
    CapacityRow,
    LoadInputs,
    LoadPerUnitRow,
)
from rfq_capacity.services.capacity_planning.utilization import (
    trailing_average,
    utilization,
)
from rfq_capacity.services.capacity_planning.week_grid import WeekBucket, generate_weeks
from rfq_capacity.utils.logging import ServiceLogger, audit_logger

T = TypeVar("T")


class CapacityDataUnavailable(Exception):
    """Fetching the inputs of a computation pass failed."""

    def __init__(self, message: str = "Failed to load capacity data"):
        super().__init__(message)
        self.message = message


class CapacityLoadService:
    """
    Service for weekly capacity load analysis.

    Provides:
    - Weekly load projection per plant/process for a division
    - Utilization matrix with trailing averages
    - Week drill-down of a single cell
    - Flattened load table of active RFQs
    - Nominal capacity and load-per-unit updates
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        policy: CapacityPolicy | None = None,
    ):
        self.session_factory = session_factory or async_session_factory
        self.policy = policy or CapacityPolicy.from_settings(settings.capacity)
        self.logger = ServiceLogger("capacity_load")

    async def _read(self, reader: Callable[[CapacityRepository], Awaitable[T]]) -> T:
        async with self.session_factory() as session:
            return await reader(CapacityRepository(session))

    async def load_inputs(self, include_capacities: bool = True) -> LoadInputs:
        """
        Fetch every input of a computation pass.

        The reads are independent and run concurrently, each on its own
        session. Any failure aborts the whole pass.

        Raises:
            CapacityDataUnavailable: If any read fails
        """
        start = time.perf_counter()
        self.logger.log_operation_start("load_inputs")

        async def no_capacities(_: CapacityRepository) -> list[CapacityRow]:
            return []

        try:
            rfqs, capacities, loads, master_data = await asyncio.gather(
                self._read(lambda repo: repo.list_rfqs()),
                self._read(
                    (lambda repo: repo.list_nominal_capacities())
                    if include_capacities else no_capacities
                ),
                self._read(lambda repo: repo.list_load_per_unit()),
                self._read(lambda repo: repo.get_master_data()),
            )
        except Exception as exc:
            self.logger.log_operation_failed("load_inputs", exc)
            raise CapacityDataUnavailable() from exc

        inputs = LoadInputs(
            rfqs=tuple(rfqs),
            capacities=tuple(capacities),
            loads_per_unit=tuple(loads),
            master_data=master_data,
        )
        self.logger.log_operation_complete(
            "load_inputs",
            duration_ms=(time.perf_counter() - start) * 1000,
            rfq_count=len(inputs.rfqs),
            capacity_entries=len(inputs.capacities),
            load_per_unit_entries=len(inputs.loads_per_unit),
        )
        return inputs

    def resolver_for(self, inputs: LoadInputs) -> ReferenceResolver:
        return ReferenceResolver.from_rows(
            inputs.master_data,
            capacity_rows=inputs.capacities,
            load_rows=inputs.loads_per_unit,
            policy=self.policy,
        )

    async def _project(
        self,
        division: str,
        horizon_weeks: int | None,
        reference_now: date | datetime | None,
    ) -> tuple[list[WeekBucket], ReferenceResolver]:
        weeks = generate_weeks(horizon_weeks or self.policy.horizon_weeks, reference_now)
        inputs = await self.load_inputs()
        resolver = self.resolver_for(inputs)

        projected = project_weekly_load(inputs.rfqs, weeks, resolver, division, self.policy)

        skipped = count_unresolved_lines(inputs.rfqs, resolver)
        if skipped:
            self.logger.logger.warning(
                "unresolved_worksharing_lines",
                service=self.logger.service_name,
                count=skipped,
            )
        return projected, resolver

    async def compute_weekly_load(
        self,
        division: str,
        horizon_weeks: int | None = None,
        reference_now: date | datetime | None = None,
    ) -> list[WeekBucket]:
        """
        Project weekly load for one division.

        Args:
            division: Division to scope the projection to
            horizon_weeks: Number of weeks, defaults to the configured horizon
            reference_now: Anchor date, defaults to today

        Returns:
            Week buckets with populated load cells
        """
        self.logger.log_operation_start("compute_weekly_load", division=division)
        weeks, _ = await self._project(division, horizon_weeks, reference_now)
        self.logger.log_operation_complete(
            "compute_weekly_load",
            division=division,
            weeks=len(weeks),
            cells=sum(len(week.loads) for week in weeks),
        )
        return weeks

    async def compute_load_matrix(
        self,
        division: str,
        horizon_weeks: int | None = None,
        reference_now: date | datetime | None = None,
    ) -> LoadMatrix:
        """Utilization matrix of the loaded plant/process rows of a division."""
        self.logger.log_operation_start("compute_load_matrix", division=division)
        weeks, resolver = await self._project(division, horizon_weeks, reference_now)

        rows = rows_with_load(build_plant_process_rows(resolver, division, self.policy), weeks)
        matrix = build_load_matrix(division, weeks, rows, self.policy)

        self.logger.log_operation_complete(
            "compute_load_matrix",
            division=division,
            rows=len(matrix.rows),
        )
        return matrix

    async def week_drilldown(
        self,
        division: str,
        week_index: int,
        plant: str,
        process: str,
        horizon_weeks: int | None = None,
        reference_now: date | datetime | None = None,
    ) -> WeekDrilldown:
        """
        Contributions to one plant/process cell of one week.

        Raises:
            ValueError: If week_index is outside the horizon
        """
        weeks, resolver = await self._project(division, horizon_weeks, reference_now)
        if not 0 <= week_index < len(weeks):
            raise ValueError(f"Week index {week_index} outside horizon of {len(weeks)} weeks")

        return week_drilldown(
            weeks[week_index],
            plant,
            process,
            resolver.capacity_for(plant, process),
            self.policy,
        )

    @staticmethod
    def compute_utilization(week: WeekBucket, key: str, capacity: float) -> float:
        """Utilization percentage of one cell; 0 for non-positive capacity."""
        return utilization(week.hours(key), capacity)

    def compute_trailing_average(
        self,
        weeks: Sequence[WeekBucket],
        key: str,
        window_size: int | None = None,
    ) -> float:
        """Average of the loaded weeks among the first `window_size` weeks."""
        return trailing_average(weeks, key, window_size or self.policy.average_window_weeks)

    async def flatten_load_table(
        self,
        status_filter: str | None = None,
        sort: Sequence[SortKey] = (),
    ) -> list[LoadTableRow]:
        """
        Load table rows of the RFQs with the given status.

        Args:
            status_filter: Lifecycle status, defaults to the active status
            sort: Sort keys, primary first; unsorted when empty

        Returns:
            Rows, sorted when sort keys are given
        """
        status = status_filter or self.policy.active_status
        self.logger.log_operation_start("flatten_load_table", status=status)

        inputs = await self.load_inputs(include_capacities=False)
        rows = flatten_load_table(inputs.rfqs, self.resolver_for(inputs), status, self.policy)
        if sort:
            rows = sort_load_table(rows, sort)

        self.logger.log_operation_complete("flatten_load_table", status=status, rows=len(rows))
        return rows

    async def list_divisions(self) -> list[str]:
        """Division names available for the capacity view."""
        try:
            master_data = await self._read(lambda repo: repo.get_master_data())
        except Exception as exc:
            self.logger.log_operation_failed("list_divisions", exc)
            raise CapacityDataUnavailable() from exc
        return ReferenceResolver(master_data, policy=self.policy).divisions()

    async def _write(self, writer: Callable[[CapacityRepository], Awaitable[T]]) -> T:
        async with self.session_factory() as session:
            async with session.begin():
                return await writer(CapacityRepository(session))

    async def save_nominal_capacity(
        self,
        process_id: str,
        plant_id: str,
        weekly_hours: float,
    ) -> CapacityRow:
        """Upsert the nominal weekly capacity of a (process, plant) pair."""
        stored, previous = await self._write(
            lambda repo: repo.save_nominal_capacity(process_id, plant_id, weekly_hours)
        )
        self._audit("nominal_capacity", stored, previous)
        return stored

    async def save_load_per_unit(
        self,
        process_id: str,
        plant_id: str,
        hours_per_unit: float,
    ) -> LoadPerUnitRow:
        """Upsert the hours per unit of a (process, plant) pair."""
        stored, previous = await self._write(
            lambda repo: repo.save_load_per_unit(process_id, plant_id, hours_per_unit)
        )
        self._audit("load_per_unit", stored, previous)
        return stored

    def _audit(self, resource_type: str, stored: Any, previous: Any | None) -> None:
        audit_logger.log_action(
            action="create" if previous is None else "update",
            resource_type=resource_type,
            resource_id=f"{stored.process_id}:{stored.plant_id}",
            old_values=vars(previous) if previous else None,
            new_values=vars(stored),
        )
