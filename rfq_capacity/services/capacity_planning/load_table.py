"""
Load table flattener.

Expands each RFQ into one row per corporate step and per worksharing line,
with the row's own hours. Independent of the week grid.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable, Sequence

from rfq_capacity.services.capacity_planning.policy import (
    CORPORATE_STEPS,
    REVIEW_FLAT_HOURS,
    REVIEW_HOURS_PER_UNIT,
    CapacityPolicy,
    CorporateStep,
    CorporateStepKind,
    DEFAULT_POLICY,
    banded_hours,
)
from rfq_capacity.services.capacity_planning.reference import ReferenceResolver
from rfq_capacity.services.capacity_planning.snapshot import RFQRecord
from rfq_capacity.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoadTableRow:
    """One line of the load table."""
    reference: str
    planning_step: str
    plant: str
    qty_parts: int
    load_per_unit: float
    hours: float
    start_date: date | None
    end_date: date | None
    division: str | None = None
    is_corporate: bool = False


def corporate_step_hours(step: CorporateStep, quantity: int) -> tuple[float, float]:
    """
    Hours and displayed load-per-unit of a corporate step.

    The review step charges a flat rate per unit (or a flat amount for a
    zero quantity); banded steps derive load-per-unit from the band hours.
    """
    if step.kind == CorporateStepKind.PER_UNIT:
        if quantity == 0:
            return REVIEW_FLAT_HOURS, REVIEW_FLAT_HOURS
        return quantity * REVIEW_HOURS_PER_UNIT, REVIEW_HOURS_PER_UNIT

    hours = banded_hours(quantity)
    return hours, hours / max(1, quantity)


def flatten_load_table(
    rfqs: Iterable[RFQRecord],
    resolver: ReferenceResolver,
    status_filter: str | None = None,
    policy: CapacityPolicy = DEFAULT_POLICY,
) -> list[LoadTableRow]:
    """
    Flatten RFQs with the given status into load table rows.

    Every RFQ yields its three corporate rows first, attributed to the
    corporate plant of its proposal leader's division, then one row per
    worksharing line whose plant resolves to a site.

    Args:
        rfqs: RFQs to flatten
        resolver: Reference resolver with load-per-unit configuration
        status_filter: Lifecycle status to keep, defaults to the active status
        policy: Defaults and stage selection

    Returns:
        Rows in RFQ order
    """
    status = status_filter or policy.active_status
    rows: list[LoadTableRow] = []

    for rfq in rfqs:
        if rfq.phase_status != status:
            continue

        quantity = rfq.total_qty_to_quote
        division = resolver.corporate_division(rfq)
        corporate_plant = resolver.corporate_plant_name(division)

        for step in CORPORATE_STEPS:
            hours, per_unit = corporate_step_hours(step, quantity)
            rows.append(
                LoadTableRow(
                    reference=rfq.reference,
                    planning_step=step.name,
                    plant=corporate_plant,
                    qty_parts=quantity,
                    load_per_unit=per_unit,
                    hours=hours,
                    start_date=rfq.planned_date(step.start_team),
                    end_date=rfq.planned_date(step.end_team),
                    division=division,
                    is_corporate=True,
                )
            )

        for line in rfq.worksharing:
            site = resolver.site_for_plant(line.plant)
            if site is None:
                logger.debug(
                    "worksharing_line_skipped",
                    rfq_reference=rfq.reference,
                    plant=line.plant,
                    process=line.process,
                    reason="unknown_plant",
                )
                continue

            per_unit = resolver.load_per_unit_for(line.plant, line.process)
            rows.append(
                LoadTableRow(
                    reference=rfq.reference,
                    planning_step=line.process,
                    plant=line.plant,
                    qty_parts=line.qty_to_quote,
                    load_per_unit=per_unit,
                    hours=line.qty_to_quote * per_unit,
                    start_date=rfq.planned_date(policy.spread_start),
                    end_date=rfq.planned_date(policy.spread_end),
                    division=site.division_name,
                )
            )

    return rows


# Sorting

class ColumnType(str, Enum):
    NUMERIC = "numeric"
    DATE = "date"
    LEXICAL = "lexical"


COLUMN_TYPES: dict[str, ColumnType] = {
    "reference": ColumnType.LEXICAL,
    "planning_step": ColumnType.LEXICAL,
    "plant": ColumnType.LEXICAL,
    "division": ColumnType.LEXICAL,
    "qty_parts": ColumnType.NUMERIC,
    "load_per_unit": ColumnType.NUMERIC,
    "hours": ColumnType.NUMERIC,
    "start_date": ColumnType.DATE,
    "end_date": ColumnType.DATE,
}


@dataclass(frozen=True)
class SortKey:
    column: str
    descending: bool = False

    def __post_init__(self):
        if self.column not in COLUMN_TYPES:
            raise ValueError(f"Unknown load table column: {self.column}")


def _sort_value(row: LoadTableRow, column: str) -> Any:
    value = getattr(row, column)
    column_type = COLUMN_TYPES[column]
    if column_type == ColumnType.DATE:
        return value or date.min
    if column_type == ColumnType.NUMERIC:
        return float(value)
    return value or ""


def sort_load_table(
    rows: Sequence[LoadTableRow],
    keys: Sequence[SortKey],
) -> list[LoadTableRow]:
    """
    Stable multi-key sort; the first key is the primary one.

    Returns a new list and leaves `rows` untouched.
    """
    ordered = list(rows)
    # Stable sorts applied from the least significant key up
    for key in reversed(keys):
        ordered.sort(key=lambda row: _sort_value(row, key.column), reverse=key.descending)
    return ordered


def parse_sort_spec(spec: str | None) -> list[SortKey]:
    """
    Parse ``"hours:desc,reference"`` into sort keys.

    Direction defaults to ascending; accepted directions are asc and desc.
    """
    if not spec:
        return []

    keys = []
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        column, _, direction = part.partition(":")
        direction = direction.strip().lower() or "asc"
        if direction not in ("asc", "desc"):
            raise ValueError(f"Unknown sort direction: {direction}")
        keys.append(SortKey(column.strip(), descending=direction == "desc"))
    return keys
