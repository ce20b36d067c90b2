"""
Reference resolution over a master data snapshot.

Resolves plant > site > division chains, stakeholder divisions and the
capacity/load-per-unit values of (plant, process) pairs. Lookups never
raise for unknown names: they return None and callers skip the record.
"""

from dataclasses import dataclass, field
from typing import Iterable

from rfq_capacity.services.capacity_planning.policy import CapacityPolicy, DEFAULT_POLICY
from rfq_capacity.services.capacity_planning.snapshot import (
    CapacityRow,
    LoadPerUnitRow,
    MasterDataSnapshot,
    PlantRecord,
    RFQRecord,
    SiteRecord,
)


def plant_process_key(plant: str, process: str) -> str:
    """Key of a plant/process cell, e.g. ``"Plant1-Welding"``."""
    return f"{plant}-{process}"


@dataclass(frozen=True)
class PlantProcessTable:
    """
    Sparse table of values keyed by (plant name, process name).

    Absence is distinct from zero: `get` returns None for a missing entry,
    `get_or_default` substitutes the caller's default.
    """
    values: dict[tuple[str, str], float] = field(default_factory=dict)

    def get(self, plant: str, process: str) -> float | None:
        return self.values.get((plant, process))

    def get_or_default(self, plant: str, process: str, default: float) -> float:
        value = self.get(plant, process)
        return default if value is None else value

    def __contains__(self, pair: tuple[str, str]) -> bool:
        return pair in self.values

    def __len__(self) -> int:
        return len(self.values)

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[CapacityRow | LoadPerUnitRow],
        snapshot: MasterDataSnapshot,
    ) -> "PlantProcessTable":
        """
        Build a name-keyed table from id-keyed configuration rows.

        Rows whose process or plant id is not in the snapshot are dropped.
        """
        plant_names = {plant.id: plant.name for plant in snapshot.plants}
        process_names = {process.id: process.name for process in snapshot.processes}

        values: dict[tuple[str, str], float] = {}
        for entry in entries:
            plant = plant_names.get(entry.plant_id)
            process = process_names.get(entry.process_id)
            if plant is None or process is None:
                continue
            if isinstance(entry, CapacityRow):
                values[(plant, process)] = float(entry.weekly_hours)
            else:
                values[(plant, process)] = float(entry.hours_per_unit)
        return cls(values)


class ReferenceResolver:
    """
    Pure lookup service over one master data snapshot.

    Builds name indexes once; every method is a dictionary lookup.
    """

    def __init__(
        self,
        snapshot: MasterDataSnapshot,
        capacities: PlantProcessTable | None = None,
        loads_per_unit: PlantProcessTable | None = None,
        policy: CapacityPolicy = DEFAULT_POLICY,
    ):
        self.snapshot = snapshot
        self.capacities = capacities or PlantProcessTable()
        self.loads_per_unit = loads_per_unit or PlantProcessTable()
        self.policy = policy

        self._plants = {plant.name: plant for plant in snapshot.plants}
        self._sites = {site.name: site for site in snapshot.sites}
        self._processes = {process.name: process for process in snapshot.processes}
        self._stakeholders = {s.name: s for s in snapshot.stakeholders}

    @classmethod
    def from_rows(
        cls,
        snapshot: MasterDataSnapshot,
        capacity_rows: Iterable[CapacityRow] = (),
        load_rows: Iterable[LoadPerUnitRow] = (),
        policy: CapacityPolicy = DEFAULT_POLICY,
    ) -> "ReferenceResolver":
        """Build a resolver from id-keyed configuration rows."""
        return cls(
            snapshot,
            capacities=PlantProcessTable.from_entries(capacity_rows, snapshot),
            loads_per_unit=PlantProcessTable.from_entries(load_rows, snapshot),
            policy=policy,
        )

    # Hierarchy

    def plant(self, name: str) -> PlantRecord | None:
        return self._plants.get(name)

    def has_process(self, name: str) -> bool:
        return name in self._processes

    def site_for_plant(self, plant_name: str) -> SiteRecord | None:
        plant = self._plants.get(plant_name)
        if plant is None:
            return None
        return self._sites.get(plant.site_name)

    def division_for_plant(self, plant_name: str) -> str | None:
        site = self.site_for_plant(plant_name)
        return site.division_name if site else None

    def divisions(self) -> list[str]:
        """Sorted unique division names referenced by sites."""
        return sorted({site.division_name for site in self.snapshot.sites})

    def plants_in_division(self, division: str) -> list[PlantRecord]:
        return [
            plant for plant in self.snapshot.plants
            if self.division_for_plant(plant.name) == division
        ]

    def processes_for_plant(self, plant_name: str) -> list[str]:
        return [
            ep.process_name for ep in self.snapshot.existing_processes
            if ep.plant_name == plant_name
        ]

    # Corporate cost centers

    def stakeholder_division(self, name: str | None) -> str | None:
        """Division of a stakeholder's home plant, if the whole chain resolves."""
        if not name:
            return None
        stakeholder = self._stakeholders.get(name)
        if stakeholder is None or stakeholder.plant_name is None:
            return None
        return self.division_for_plant(stakeholder.plant_name)

    def corporate_division(self, rfq: RFQRecord) -> str:
        """Division charged with an RFQ's corporate steps."""
        return self.stakeholder_division(rfq.proposal_leader) or self.policy.unknown_division

    def corporate_plant_name(self, division: str) -> str:
        return f"{self.policy.corporate_plant_prefix} {division}"

    def is_corporate_plant(self, plant_name: str) -> bool:
        return plant_name.lower().startswith(self.policy.corporate_plant_prefix.lower())

    # Configuration lookups

    def capacity_for(self, plant: str, process: str) -> float:
        """
        Nominal weekly hours of a plant/process pair.

        Corporate cost centers always get the corporate capacity; other pairs
        fall back to the default capacity when not configured.
        """
        if self.is_corporate_plant(plant):
            return self.policy.corporate_weekly_capacity
        return self.capacities.get_or_default(
            plant, process, self.policy.default_weekly_capacity
        )

    def load_per_unit_for(self, plant: str, process: str) -> float:
        """Hours per unit of a plant/process pair, 0 when not configured."""
        return self.loads_per_unit.get_or_default(plant, process, 0.0)
