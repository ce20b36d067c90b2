"""
Utility modules for the RFQ Capacity Planner.

Provides structured logging shared by the services and the HTTP layer.
"""

from rfq_capacity.utils.logging import (
    setup_logging,
    get_logger,
    RequestLogger,
    AuditLogger,
    ServiceLogger,
    request_logger,
    audit_logger,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "RequestLogger",
    "AuditLogger",
    "ServiceLogger",
    "request_logger",
    "audit_logger",
]
