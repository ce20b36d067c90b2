"""
Capacity load API routes.
"""

from fastapi import APIRouter, HTTPException, Query, status

from rfq_capacity.api.dependencies import CapacityServiceDep
from rfq_capacity.config.settings import settings
from rfq_capacity.schemas import (
    LoadMatrixResponse,
    LoadPerUnitResponse,
    LoadPerUnitUpdate,
    LoadTableResponse,
    LoadTableRowResponse,
    NominalCapacityResponse,
    NominalCapacityUpdate,
    WeekBucketResponse,
    WeekDrilldownResponse,
    WeeklyLoadResponse,
)
from rfq_capacity.services.capacity_planning.load_table import parse_sort_spec

router = APIRouter()

HorizonQuery = Query(
    None,
    ge=1,
    le=settings.capacity.max_horizon_weeks,
    description="Number of weeks, defaults to the configured horizon",
)


@router.get("/divisions")
async def list_divisions(service: CapacityServiceDep) -> list[str]:
    """List divisions available for the capacity view."""
    return await service.list_divisions()


@router.get("/weekly", response_model=WeeklyLoadResponse)
async def get_weekly_load(
    service: CapacityServiceDep,
    division: str,
    horizon_weeks: int | None = HorizonQuery,
):
    """Projected weekly load per plant/process for a division."""
    weeks = await service.compute_weekly_load(division, horizon_weeks)
    return WeeklyLoadResponse(
        division=division,
        weeks=[WeekBucketResponse.model_validate(week) for week in weeks],
    )


@router.get("/matrix", response_model=LoadMatrixResponse)
async def get_load_matrix(
    service: CapacityServiceDep,
    division: str,
    horizon_weeks: int | None = HorizonQuery,
):
    """Utilization matrix with trailing averages for a division."""
    matrix = await service.compute_load_matrix(division, horizon_weeks)
    return LoadMatrixResponse.model_validate(matrix)


@router.get("/weekly/{week_index}/drilldown", response_model=WeekDrilldownResponse)
async def get_week_drilldown(
    week_index: int,
    service: CapacityServiceDep,
    division: str,
    plant: str,
    process: str,
    horizon_weeks: int | None = HorizonQuery,
):
    """Contributions to one plant/process cell of one week."""
    try:
        drilldown = await service.week_drilldown(
            division, week_index, plant, process, horizon_weeks
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return WeekDrilldownResponse.model_validate(drilldown)


@router.get("/table", response_model=LoadTableResponse)
async def get_load_table(
    service: CapacityServiceDep,
    status_filter: str | None = Query(None, alias="status"),
    sort: str | None = Query(None, description="e.g. hours:desc,reference"),
):
    """Flattened load table of the RFQs with the given status."""
    try:
        sort_keys = parse_sort_spec(sort)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    rows = await service.flatten_load_table(status_filter, sort_keys)
    return LoadTableResponse(
        status=status_filter or service.policy.active_status,
        items=[LoadTableRowResponse.model_validate(row) for row in rows],
        total=len(rows),
    )


@router.put("/capacities", response_model=NominalCapacityResponse)
async def put_nominal_capacity(body: NominalCapacityUpdate, service: CapacityServiceDep):
    """Set the nominal weekly capacity of a process at a plant."""
    try:
        stored = await service.save_nominal_capacity(
            body.process_id, body.plant_id, body.weekly_hours
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return NominalCapacityResponse.model_validate(stored)


@router.put("/load-per-unit", response_model=LoadPerUnitResponse)
async def put_load_per_unit(body: LoadPerUnitUpdate, service: CapacityServiceDep):
    """Set the hours per unit of a process at a plant."""
    try:
        stored = await service.save_load_per_unit(
            body.process_id, body.plant_id, body.hours_per_unit
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return LoadPerUnitResponse.model_validate(stored)
