"""
Policy tables for capacity/load analysis.

Stage selection, corporate administrative steps, quantity-banded hours and
capacity defaults live here as immutable structures so every rule can be
tested in one place.
"""

from dataclasses import dataclass
from enum import Enum

from rfq_capacity.config.settings import CapacitySettings
from rfq_capacity.models.rfq import PhaseStatus, Team


@dataclass(frozen=True)
class QuantityBand:
    """Hours charged when the quoted quantity is at most `max_qty`."""
    max_qty: int | None
    hours: float


# Ordered; the first band whose max_qty covers the quantity wins.
# max_qty=None is the open-ended top band.
CORPORATE_HOURS_BANDS: tuple[QuantityBand, ...] = (
    QuantityBand(max_qty=0, hours=20.0),
    QuantityBand(max_qty=10, hours=16.0),
    QuantityBand(max_qty=50, hours=32.0),
    QuantityBand(max_qty=250, hours=50.0),
    QuantityBand(max_qty=999, hours=80.0),
    QuantityBand(max_qty=None, hours=160.0),
)


def banded_hours(
    quantity: int,
    bands: tuple[QuantityBand, ...] = CORPORATE_HOURS_BANDS,
) -> float:
    """
    Hours of a quantity-banded corporate step.

    Args:
        quantity: Total quantity to quote
        bands: Band table, ordered by ascending max_qty

    Returns:
        Hours of the first band covering the quantity
    """
    if quantity < 0:
        raise ValueError(f"Quantity cannot be negative: {quantity}")

    for band in bands:
        if band.max_qty is None or quantity <= band.max_qty:
            return band.hours

    raise ValueError(f"No band covers quantity {quantity}")


class CorporateStepKind(str, Enum):
    """How a corporate step derives its hours."""
    PER_UNIT = "per_unit"
    BANDED = "banded"


@dataclass(frozen=True)
class CorporateStep:
    """
    Division-level administrative step charged to every RFQ.

    `start_team`/`end_team` name the stages whose planned dates bound the step.
    """
    name: str
    kind: CorporateStepKind
    start_team: Team
    end_team: Team


CORPORATE_STEPS: tuple[CorporateStep, ...] = (
    CorporateStep("CBOM/SPH", CorporateStepKind.PER_UNIT, Team.BLU, Team.PIN),
    CorporateStep("COSTING", CorporateStepKind.BANDED, Team.PIN, Team.EOQ),
    CorporateStep("PRICING", CorporateStepKind.BANDED, Team.EOQ, Team.GRE),
)

CORPORATE_STEP_NAMES: tuple[str, ...] = tuple(step.name for step in CORPORATE_STEPS)

# CBOM/SPH review
REVIEW_HOURS_PER_UNIT = 0.5
REVIEW_FLAT_HOURS = 20.0


@dataclass(frozen=True)
class CapacityPolicy:
    """Defaults and thresholds applied by the capacity computations."""
    default_weekly_capacity: float = 160.0
    corporate_weekly_capacity: float = 40.0
    corporate_plant_prefix: str = "CORPORATE"
    unknown_division: str = "UNKNOWN"
    active_status: str = PhaseStatus.PROPOSAL.value
    spread_start: Team = Team.PIN
    spread_end: Team = Team.EOQ
    horizon_weeks: int = 12
    average_window_weeks: int = 7
    warning_threshold_pct: float = 80.0
    over_capacity_threshold_pct: float = 100.0

    @classmethod
    def from_settings(cls, capacity: CapacitySettings) -> "CapacityPolicy":
        """Build the policy from the CAPACITY_ settings section."""
        return cls(
            default_weekly_capacity=capacity.default_weekly_capacity,
            corporate_weekly_capacity=capacity.corporate_weekly_capacity,
            corporate_plant_prefix=capacity.corporate_plant_prefix,
            unknown_division=capacity.unknown_division,
            active_status=PhaseStatus(capacity.active_status.upper()).value,
            spread_start=Team(capacity.spread_start_stage.upper()),
            spread_end=Team(capacity.spread_end_stage.upper()),
            horizon_weeks=capacity.horizon_weeks,
            average_window_weeks=capacity.average_window_weeks,
            warning_threshold_pct=capacity.warning_threshold_pct,
            over_capacity_threshold_pct=capacity.over_capacity_threshold_pct,
        )


DEFAULT_POLICY = CapacityPolicy()
