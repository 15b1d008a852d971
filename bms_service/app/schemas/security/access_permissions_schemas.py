from datetime import datetime
from typing import List, Optional
from uuid import UUID

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.security_enum import AccessEntityType, AccessLevel


class TimeWindow(EmptyStringModel):
    day_of_week: int  # 0 = Sunday
    start_time: str  # HH:mm
    end_time: str


class AccessRestrictions(EmptyStringModel):
    time_windows: Optional[List[TimeWindow]] = None
    areas: Optional[List[str]] = None
    requires_escort: Optional[bool] = None


class AccessPermissionBase(EmptyStringModel):
    building_id: UUID
    entity_type: AccessEntityType
    entity_id: str
    access_level: AccessLevel = AccessLevel.full
    restrictions: Optional[AccessRestrictions] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    notes: Optional[str] = None


class AccessPermissionCreate(AccessPermissionBase):
    pass


class AccessPermissionUpdate(EmptyStringModel):
    access_level: Optional[AccessLevel] = None
    restrictions: Optional[AccessRestrictions] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    notes: Optional[str] = None


class AccessPermissionOut(RecordOut):
    building_id: UUID
    entity_type: str
    entity_id: str
    access_level: str
    restrictions: Optional[AccessRestrictions] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    notes: Optional[str] = None
    created_by: Optional[UUID] = None


class AccessPermissionListResponse(EmptyStringModel):
    access_permissions: List[AccessPermissionOut]
    total: int


class AccessPermissionRequest(CommonQueryParams):
    building_id: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    access_level: Optional[str] = None


class AccessCheckRequest(EmptyStringModel):
    building_id: str
    entity_type: str
    entity_id: str
    at: Optional[datetime] = None


class AccessCheckOut(EmptyStringModel):
    allowed: bool
    reason: str
