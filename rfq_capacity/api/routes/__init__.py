"""API Routes for the RFQ Capacity Planner."""

from rfq_capacity.api.routes import load

__all__ = ["load"]
