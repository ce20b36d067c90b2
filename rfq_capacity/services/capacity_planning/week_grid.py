"""
Rolling grid of ISO weeks.

Each bucket collects the projected load of every plant/process cell for one
Monday-to-Sunday week. Buckets are rebuilt from scratch on every pass.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta


@dataclass
class LoadDetail:
    """One RFQ contribution to a load cell."""
    rfq_reference: str
    planning_step: str
    hours: float


@dataclass
class LoadCell:
    """Accumulated hours of one plant/process key in one week."""
    total: float = 0.0
    details: list[LoadDetail] = field(default_factory=list)

    def add(self, rfq_reference: str, planning_step: str, hours: float) -> None:
        self.total += hours
        self.details.append(LoadDetail(rfq_reference, planning_step, hours))


@dataclass
class WeekBucket:
    """ISO week with its load cells, keyed by plant/process key."""
    week_number: int
    week_year: int
    start_date: date
    end_date: date
    loads: dict[str, LoadCell] = field(default_factory=dict)

    def cell(self, key: str) -> LoadCell:
        """Cell for `key`, created on first use."""
        if key not in self.loads:
            self.loads[key] = LoadCell()
        return self.loads[key]

    def hours(self, key: str) -> float:
        """Total hours of a cell; an absent cell counts as 0."""
        cell = self.loads.get(key)
        return cell.total if cell else 0.0

    @property
    def label(self) -> str:
        return f"W{self.week_number:02d}-{self.week_year}"


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def iso_week(value: date | datetime) -> tuple[int, int]:
    """
    ISO-8601 week number and week-numbering year.

    The week belongs to the year of its Thursday, so Dec 31 2024 is week 1
    of 2025.
    """
    year, week, _ = _as_date(value).isocalendar()
    return week, year


def week_start(value: date | datetime) -> date:
    """Monday on or before the given day (ISO weekdays, Sunday = 7)."""
    day = _as_date(value)
    return day - timedelta(days=day.isoweekday() - 1)


def generate_weeks(
    horizon_weeks: int = 12,
    reference_now: date | datetime | None = None,
) -> list[WeekBucket]:
    """
    Build `horizon_weeks` consecutive empty week buckets.

    Args:
        horizon_weeks: Number of weeks to generate
        reference_now: Anchor date, defaults to today; the first bucket
            starts on the Monday of its ISO week

    Returns:
        Ordered list of buckets, each starting 7 days after the previous
    """
    if horizon_weeks < 1:
        raise ValueError(f"Horizon must be at least one week, got {horizon_weeks}")

    first_monday = week_start(reference_now or date.today())

    weeks = []
    for index in range(horizon_weeks):
        start = first_monday + timedelta(weeks=index)
        week_number, week_year = iso_week(start)
        weeks.append(
            WeekBucket(
                week_number=week_number,
                week_year=week_year,
                start_date=start,
                end_date=start + timedelta(days=6),
            )
        )
    return weeks
