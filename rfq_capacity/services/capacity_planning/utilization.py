"""
Utilization aggregation over projected week buckets.
"""

from enum import Enum
from typing import Sequence

from rfq_capacity.services.capacity_planning.policy import CapacityPolicy, DEFAULT_POLICY
from rfq_capacity.services.capacity_planning.week_grid import WeekBucket


class LoadBand(str, Enum):
    """Severity band of a utilization percentage."""
    NOMINAL = "nominal"
    WARNING = "warning"
    OVER_CAPACITY = "over_capacity"


def utilization(hours: float, capacity: float) -> float:
    """Hours as a percentage of capacity; 0 when capacity is not positive."""
    if capacity <= 0:
        return 0.0
    return hours / capacity * 100


def trailing_average(
    weeks: Sequence[WeekBucket],
    key: str,
    window_size: int = 7,
) -> float:
    """
    Average load of a cell over the first `window_size` weeks.

    Only weeks with a positive load count in the denominator, so idle weeks
    do not dilute the average. Returns 0 when no week in the window is loaded.
    """
    if window_size < 1:
        raise ValueError(f"Window size must be at least 1, got {window_size}")

    loaded = [week.hours(key) for week in weeks[:window_size] if week.hours(key) > 0]
    if not loaded:
        return 0.0
    return sum(loaded) / len(loaded)


def classify_utilization(
    percentage: float,
    policy: CapacityPolicy = DEFAULT_POLICY,
) -> LoadBand:
    """Up to 80% is nominal, up to 100% a warning, above that over capacity."""
    if percentage > policy.over_capacity_threshold_pct:
        return LoadBand.OVER_CAPACITY
    if percentage > policy.warning_threshold_pct:
        return LoadBand.WARNING
    return LoadBand.NOMINAL


def bar_width(percentage: float) -> float:
    """Width of a utilization bar, capped to [0, 100]."""
    return max(0.0, min(percentage, 100.0))
