from typing import List, Optional
from uuid import UUID
from pydantic import Field

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.space_sites_enum import UnitStatus, UnitType


class UnitBase(EmptyStringModel):
    building_id: UUID
    unit_number: str
    floor: Optional[int] = None
    unit_type: UnitType = UnitType.apartment
    area: Optional[float] = Field(default=None, ge=0)
    bedrooms: Optional[int] = Field(default=None, ge=0)
    bathrooms: Optional[int] = Field(default=None, ge=0)
    status: UnitStatus = UnitStatus.available
    rent_amount: Optional[float] = Field(default=None, ge=0)
    rate_per_sqm_override: Optional[float] = Field(default=None, ge=0)
    flat_rent_override: Optional[float] = Field(default=None, ge=0)


class UnitCreate(UnitBase):
    pass


class UnitUpdate(EmptyStringModel):
    building_id: Optional[UUID] = None
    unit_number: Optional[str] = None
    floor: Optional[int] = None
    unit_type: Optional[UnitType] = None
    area: Optional[float] = Field(default=None, ge=0)
    bedrooms: Optional[int] = Field(default=None, ge=0)
    bathrooms: Optional[int] = Field(default=None, ge=0)
    status: Optional[UnitStatus] = None
    rent_amount: Optional[float] = Field(default=None, ge=0)
    rate_per_sqm_override: Optional[float] = Field(default=None, ge=0)
    flat_rent_override: Optional[float] = Field(default=None, ge=0)


class UnitOut(RecordOut):
    building_id: UUID
    unit_number: str
    floor: Optional[int] = None
    unit_type: str
    area: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    status: str
    rent_amount: Optional[float] = None
    rate_per_sqm_override: Optional[float] = None
    flat_rent_override: Optional[float] = None


class UnitListResponse(EmptyStringModel):
    units: List[UnitOut]
    total: int


class UnitRequest(CommonQueryParams):
    building_id: Optional[str] = None
    status: Optional[str] = None
    unit_type: Optional[str] = None
    floor: Optional[int] = None
