from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID
from pydantic import Field

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.maintenance_assets_enum import AssetStatus, DepreciationMethod


class Warranty(EmptyStringModel):
    provider: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    terms: Optional[str] = None


class Depreciation(EmptyStringModel):
    method: DepreciationMethod = DepreciationMethod.straight_line
    useful_life_years: Optional[float] = None
    salvage_value: Optional[float] = Field(default=0, ge=0)
    depreciation_start_date: Optional[datetime] = None
    annual_depreciation: Optional[float] = None
    accumulated_depreciation: Optional[float] = None


class MaintenanceSchedule(EmptyStringModel):
    frequency: Optional[str] = None
    last_maintenance_date: Optional[datetime] = None
    next_maintenance_date: Optional[datetime] = None


class AssetBase(EmptyStringModel):
    building_id: UUID
    unit_id: Optional[UUID] = None
    name: str
    asset_type: str
    status: AssetStatus = AssetStatus.active
    serial_number: Optional[str] = None
    model: Optional[str] = None
    manufacturer: Optional[str] = None
    purchase_date: Optional[datetime] = None
    purchase_price: Optional[float] = Field(default=None, ge=0)
    current_value: Optional[float] = Field(default=None, ge=0)
    location: Optional[str] = None
    warranty: Optional[Warranty] = None
    depreciation: Optional[Depreciation] = None
    maintenance_schedule: Optional[MaintenanceSchedule] = None


class AssetCreate(AssetBase):
    pass


class AssetUpdate(EmptyStringModel):
    unit_id: Optional[UUID] = None
    name: Optional[str] = None
    asset_type: Optional[str] = None
    status: Optional[AssetStatus] = None
    serial_number: Optional[str] = None
    model: Optional[str] = None
    manufacturer: Optional[str] = None
    purchase_date: Optional[datetime] = None
    purchase_price: Optional[float] = Field(default=None, ge=0)
    current_value: Optional[float] = Field(default=None, ge=0)
    location: Optional[str] = None
    warranty: Optional[Warranty] = None
    depreciation: Optional[Depreciation] = None
    maintenance_schedule: Optional[MaintenanceSchedule] = None


class AssetOut(RecordOut):
    building_id: UUID
    unit_id: Optional[UUID] = None
    name: str
    asset_type: str
    status: str
    serial_number: Optional[str] = None
    model: Optional[str] = None
    manufacturer: Optional[str] = None
    purchase_date: Optional[datetime] = None
    purchase_price: Optional[float] = None
    current_value: Optional[float] = None
    location: Optional[str] = None
    warranty: Optional[Warranty] = None
    depreciation: Optional[Depreciation] = None
    maintenance_schedule: Optional[MaintenanceSchedule] = None


class AssetListResponse(EmptyStringModel):
    assets: List[AssetOut]
    total: int


class AssetRequest(CommonQueryParams):
    building_id: Optional[str] = None
    unit_id: Optional[str] = None
    asset_type: Optional[str] = None
    status: Optional[str] = None


class DepreciationOut(EmptyStringModel):
    method: str
    annual_depreciation: float
    accumulated_depreciation: float
    current_value: float
    years_elapsed: float


class ReliabilityOut(EmptyStringModel):
    asset_id: UUID
    period_months: int
    total_maintenance_count: int
    counts_by_type: Dict[str, int]
    total_cost: float
    average_cost: float
    total_downtime_hours: float
    average_downtime_hours: float
    average_days_between_maintenance: Optional[float] = None
    last_maintenance_date: Optional[datetime] = None
    next_maintenance_date: Optional[datetime] = None
    reliability_score: int
