"""HTTP API of the RFQ Capacity Planner."""
