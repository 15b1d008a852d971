from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import Field

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.space_sites_enum import BuildingStatus, BuildingType


class Address(EmptyStringModel):
    street: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None


class FloorOverride(EmptyStringModel):
    floor: int
    rate_per_sqm: float = Field(ge=0)


class RentPolicy(EmptyStringModel):
    base_rate_per_sqm: Optional[float] = Field(default=None, ge=0)
    decrement_per_floor: Optional[float] = Field(default=0, ge=0)
    ground_floor_multiplier: Optional[float] = Field(default=1, gt=0)
    min_rate_per_sqm: Optional[float] = Field(default=None, ge=0)
    effective_date: Optional[str] = None
    floor_overrides: Optional[List[FloorOverride]] = None


class BuildingBase(EmptyStringModel):
    name: str
    address: Optional[Address] = None
    building_type: BuildingType = BuildingType.residential
    total_floors: Optional[int] = Field(default=None, ge=0)
    total_units: Optional[int] = Field(default=None, ge=0)
    status: BuildingStatus = BuildingStatus.active
    manager_id: Optional[UUID] = None
    settings: Optional[Dict[str, Any]] = None
    rent_policy: Optional[RentPolicy] = None


class BuildingCreate(BuildingBase):
    pass


class BuildingUpdate(EmptyStringModel):
    name: Optional[str] = None
    address: Optional[Address] = None
    building_type: Optional[BuildingType] = None
    total_floors: Optional[int] = Field(default=None, ge=0)
    total_units: Optional[int] = Field(default=None, ge=0)
    status: Optional[BuildingStatus] = None
    manager_id: Optional[UUID] = None
    settings: Optional[Dict[str, Any]] = None
    rent_policy: Optional[RentPolicy] = None


class BuildingOut(RecordOut):
    name: str
    address: Optional[Address] = None
    building_type: str
    total_floors: Optional[int] = None
    total_units: Optional[int] = None
    status: str
    manager_id: Optional[UUID] = None
    settings: Optional[Dict[str, Any]] = None
    rent_policy: Optional[RentPolicy] = None


class BuildingListResponse(EmptyStringModel):
    buildings: List[BuildingOut]
    total: int


class BuildingRequest(CommonQueryParams):
    status: Optional[str] = None
    building_type: Optional[str] = None
    manager_id: Optional[str] = None
