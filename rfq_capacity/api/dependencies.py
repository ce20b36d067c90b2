"""
FastAPI dependencies for the capacity load endpoints.
"""

from typing import Annotated

from fastapi import Depends

from rfq_capacity.services.capacity_planning import CapacityLoadService


def get_capacity_service() -> CapacityLoadService:
    """
    Get the capacity load service.

    The service opens its own sessions, one per concurrent read.
    """
    return CapacityLoadService()


CapacityServiceDep = Annotated[CapacityLoadService, Depends(get_capacity_service)]
