from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import Field

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ..space_sites.buildings_schemas import RentPolicy


class UnitRentOverride(EmptyStringModel):
    unit_id: UUID
    rate_per_sqm_override: Optional[float] = Field(default=None, ge=0)
    flat_rent_override: Optional[float] = Field(default=None, ge=0)


class FloorFilter(EmptyStringModel):
    from_floor: Optional[int] = Field(default=None, alias="from")
    to_floor: Optional[int] = Field(default=None, alias="to")


class RentBulkUpdateRequest(EmptyStringModel):
    building_id: UUID
    policy: Optional[RentPolicy] = None
    unit_overrides: Optional[List[UnitRentOverride]] = None
    floor_filter: Optional[FloorFilter] = None
    apply: bool = False
    effective_from: Optional[datetime] = None


class RentUpdateResult(EmptyStringModel):
    lease_id: UUID
    unit_id: UUID
    unit_number: Optional[str] = None
    floor: Optional[int] = None
    old_rent: float
    new_rent: float
    rate_source: str


class RentBulkUpdateResponse(EmptyStringModel):
    message: str
    count: int
    results: List[RentUpdateResult]
