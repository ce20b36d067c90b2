"""
RFQ load projector.

Spreads the labor hours implied by each worksharing line evenly over the
weeks between two planning milestones and accumulates them into a week grid.
"""

import math
from dataclasses import replace
from datetime import date
from typing import Iterable

from rfq_capacity.services.capacity_planning.policy import CapacityPolicy, DEFAULT_POLICY
from rfq_capacity.services.capacity_planning.reference import (
    ReferenceResolver,
    plant_process_key,
)
from rfq_capacity.services.capacity_planning.snapshot import RFQRecord, WorksharingLine
from rfq_capacity.services.capacity_planning.week_grid import WeekBucket
from rfq_capacity.utils.logging import get_logger

logger = get_logger(__name__)


def spread_window(
    rfq: RFQRecord,
    policy: CapacityPolicy = DEFAULT_POLICY,
) -> tuple[date, date] | None:
    """Planned dates bounding the spreading window, or None if either is unset."""
    start = rfq.planned_date(policy.spread_start)
    end = rfq.planned_date(policy.spread_end)
    if start is None or end is None:
        return None
    return start, end


def spread_weeks(start: date, end: date) -> int:
    """Number of weeks the load is spread over; at least 1."""
    return max(1, math.ceil((end - start).days / 7))


def line_step_label(line: WorksharingLine) -> str:
    return f"{line.process} ({line.qty_to_quote} pcs)"


def _skip_reason(
    line: WorksharingLine,
    resolver: ReferenceResolver,
    division: str,
) -> str | None:
    if resolver.plant(line.plant) is None:
        return "unknown_plant"
    if not resolver.has_process(line.process):
        return "unknown_process"
    line_division = resolver.division_for_plant(line.plant)
    if line_division is None:
        return "unknown_site"
    if line_division != division:
        return "other_division"
    return None


def project_weekly_load(
    rfqs: Iterable[RFQRecord],
    weeks: list[WeekBucket],
    resolver: ReferenceResolver,
    division: str,
    policy: CapacityPolicy = DEFAULT_POLICY,
) -> list[WeekBucket]:
    """
    Project RFQ workload onto a week grid for one division.

    A week receives an RFQ's load when its start date falls within the
    inclusive window [spread start, spread end]; weeks that merely overlap
    the window are not matched. Each matched week gets
    ``qty * load_per_unit / spread_weeks`` hours per worksharing line.

    Args:
        rfqs: RFQs to project
        weeks: Week grid; left untouched, copies are returned
        resolver: Reference resolver with load-per-unit configuration
        division: Only lines whose plant belongs to this division count
        policy: Stage selection

    Returns:
        New week buckets with populated load cells
    """
    projected = [replace(week, loads={}) for week in weeks]

    for rfq in rfqs:
        window = spread_window(rfq, policy)
        if window is None:
            continue

        start, end = window
        total_weeks = spread_weeks(start, end)
        matched = [week for week in projected if start <= week.start_date <= end]
        if not matched:
            continue

        for line in rfq.worksharing:
            reason = _skip_reason(line, resolver, division)
            if reason is not None:
                if reason != "other_division":
                    logger.debug(
                        "worksharing_line_skipped",
                        rfq_reference=rfq.reference,
                        plant=line.plant,
                        process=line.process,
                        reason=reason,
                    )
                continue

            line_hours = line.qty_to_quote * resolver.load_per_unit_for(line.plant, line.process)
            weekly_share = line_hours / total_weeks
            key = plant_process_key(line.plant, line.process)

            for week in matched:
                week.cell(key).add(rfq.reference, line_step_label(line), weekly_share)

    return projected


def count_unresolved_lines(
    rfqs: Iterable[RFQRecord],
    resolver: ReferenceResolver,
) -> int:
    """Worksharing lines whose plant, site or process does not resolve."""
    return sum(
        1
        for rfq in rfqs
        for line in rfq.worksharing
        if resolver.plant(line.plant) is None
        or resolver.division_for_plant(line.plant) is None
        or not resolver.has_process(line.process)
    )
