from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class SecurityStaffBase(EmptyStringModel):
    user_id: UUID
    building_id: Optional[UUID] = None
    assigned_buildings: Optional[List[UUID]] = None
    employee_id: Optional[str] = None
    badge_number: Optional[str] = None
    hire_date: Optional[datetime] = None
    emergency_contact: Optional[Dict[str, Any]] = None
    certifications: Optional[List[Any]] = None


class SecurityStaffCreate(SecurityStaffBase):
    pass


class SecurityStaffUpdate(EmptyStringModel):
    building_id: Optional[UUID] = None
    assigned_buildings: Optional[List[UUID]] = None
    employee_id: Optional[str] = None
    badge_number: Optional[str] = None
    hire_date: Optional[datetime] = None
    emergency_contact: Optional[Dict[str, Any]] = None
    certifications: Optional[List[Any]] = None


class SecurityStaffOut(RecordOut):
    user_id: UUID
    building_id: Optional[UUID] = None
    assigned_buildings: Optional[List[UUID]] = None
    employee_id: Optional[str] = None
    badge_number: Optional[str] = None
    hire_date: Optional[datetime] = None
    emergency_contact: Optional[Dict[str, Any]] = None
    certifications: Optional[List[Any]] = None


class SecurityStaffListResponse(EmptyStringModel):
    security_staff: List[SecurityStaffOut]
    total: int


class SecurityStaffRequest(CommonQueryParams):
    building_id: Optional[str] = None
