"""
Database module for the RFQ Capacity Planner.

Provides async database connections, session management,
and the base model class.
"""

from rfq_capacity.database.base import (
    Base,
    engine,
    async_session_factory,
    init_db,
    close_db,
)

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "init_db",
    "close_db",
]
