"""
Pydantic schemas for API request/response validation.

Provides data transfer objects for the capacity load endpoints.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from rfq_capacity.services.capacity_planning.utilization import LoadBand


# Base schemas
class BaseResponse(BaseModel):
    """Base response with timestamp."""
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class AttributesModel(BaseModel):
    """Schema readable from dataclass instances."""
    model_config = ConfigDict(from_attributes=True)


# Weekly load schemas
class LoadDetailResponse(AttributesModel):
    rfq_reference: str
    planning_step: str
    hours: float


class LoadCellResponse(AttributesModel):
    total: float
    details: list[LoadDetailResponse]


class WeekBucketResponse(AttributesModel):
    week_number: int
    week_year: int
    start_date: date
    end_date: date
    loads: dict[str, LoadCellResponse]


class WeeklyLoadResponse(BaseResponse):
    division: str
    weeks: list[WeekBucketResponse]


# Matrix schemas
class WeekHeaderResponse(AttributesModel):
    week_number: int
    week_year: int
    label: str
    start_date: date
    end_date: date


class CellUtilizationResponse(AttributesModel):
    hours: float
    utilization_pct: float
    band: LoadBand
    bar_width: float


class LoadMatrixRowResponse(AttributesModel):
    plant: str
    process: str
    capacity: float
    cells: list[CellUtilizationResponse]
    average: CellUtilizationResponse


class LoadMatrixResponse(BaseResponse, AttributesModel):
    division: str
    window_size: int
    weeks: list[WeekHeaderResponse]
    rows: list[LoadMatrixRowResponse]


class DrilldownDetailResponse(AttributesModel):
    rfq_reference: str
    planning_step: str
    hours: float
    share_pct: float


class WeekDrilldownResponse(AttributesModel):
    week_number: int
    week_year: int
    start_date: date
    end_date: date
    plant: str
    process: str
    total_hours: float
    capacity: float
    utilization_pct: float
    band: LoadBand
    details: list[DrilldownDetailResponse]


# Load table schemas
class LoadTableRowResponse(AttributesModel):
    reference: str
    planning_step: str
    plant: str
    qty_parts: int
    load_per_unit: float
    hours: float
    start_date: date | None
    end_date: date | None
    division: str | None
    is_corporate: bool


class LoadTableResponse(BaseResponse):
    status: str
    items: list[LoadTableRowResponse]
    total: int


# Capacity configuration schemas
class NominalCapacityUpdate(BaseModel):
    process_id: str
    plant_id: str
    weekly_hours: float = Field(gt=0)


class LoadPerUnitUpdate(BaseModel):
    process_id: str
    plant_id: str
    hours_per_unit: float = Field(ge=0)


class NominalCapacityResponse(AttributesModel):
    process_id: str
    plant_id: str
    weekly_hours: float


class LoadPerUnitResponse(AttributesModel):
    process_id: str
    plant_id: str
    hours_per_unit: float
