"""
Services module for the RFQ Capacity Planner.

Contains the business logic of the capacity/load analysis.
"""

from rfq_capacity.services.capacity_planning import CapacityLoadService

__all__ = ["CapacityLoadService"]
