"""
Data models for the RFQ Capacity Planner.

This module provides SQLAlchemy ORM models for:
- Reference master data (divisions, sites, plants, processes, stakeholders)
- RFQs with their planning stages and worksharing lines
- Capacity configuration (nominal capacity, load per unit)
"""

from rfq_capacity.models.master_data import (
    Division,
    Site,
    Plant,
    Process,
    ExistingProcess,
    Stakeholder,
)

from rfq_capacity.models.rfq import (
    RFQ,
    RFQPlanning,
    RFQWorksharing,
    PhaseStatus,
    Team,
)

from rfq_capacity.models.capacity import (
    NominalCapacity,
    LoadPerUnit,
)

__all__ = [
    # Master data
    "Division",
    "Site",
    "Plant",
    "Process",
    "ExistingProcess",
    "Stakeholder",
    # RFQ
    "RFQ",
    "RFQPlanning",
    "RFQWorksharing",
    "PhaseStatus",
    "Team",
    # Capacity
    "NominalCapacity",
    "LoadPerUnit",
]
