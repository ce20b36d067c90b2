"""
Capacity Planning Service.

Provides functionality for:
- Rolling ISO week grids
- Projection of RFQ workload onto plant/process cells
- Utilization, trailing averages and severity bands
- Flattened load table of active RFQs
"""

from rfq_capacity.services.capacity_planning.service import (
    CapacityDataUnavailable,
    CapacityLoadService,
)
from rfq_capacity.services.capacity_planning.policy import CapacityPolicy
from rfq_capacity.services.capacity_planning.reference import ReferenceResolver
from rfq_capacity.services.capacity_planning.week_grid import generate_weeks
from rfq_capacity.services.capacity_planning.projector import project_weekly_load
from rfq_capacity.services.capacity_planning.load_table import flatten_load_table

__all__ = [
    "CapacityDataUnavailable",
    "CapacityLoadService",
    "CapacityPolicy",
    "ReferenceResolver",
    "generate_weeks",
    "project_weekly_load",
    "flatten_load_table",
]
