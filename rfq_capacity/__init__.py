"""
RFQ Capacity Planner

Projects quotation workload onto plant/process capacity, week by week.
"""

__version__ = "1.0.0"
