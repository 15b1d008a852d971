from datetime import datetime
from typing import List, Optional
from uuid import UUID

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class VisitorLogCreate(EmptyStringModel):
    building_id: UUID
    visitor_name: Optional[str] = None
    visitor_phone: Optional[str] = None
    visitor_id_number: Optional[str] = None
    host_tenant_id: Optional[UUID] = None
    host_unit_id: Optional[UUID] = None
    purpose: Optional[str] = None
    vehicle_plate_number: Optional[str] = None
    entry_time: Optional[datetime] = None
    notes: Optional[str] = None


class VisitorLogUpdate(EmptyStringModel):
    visitor_name: Optional[str] = None
    visitor_phone: Optional[str] = None
    visitor_id_number: Optional[str] = None
    host_tenant_id: Optional[UUID] = None
    host_unit_id: Optional[UUID] = None
    purpose: Optional[str] = None
    vehicle_plate_number: Optional[str] = None
    notes: Optional[str] = None


class VisitorExitRequest(EmptyStringModel):
    exit_time: Optional[datetime] = None


class VisitorLogOut(RecordOut):
    building_id: UUID
    visitor_name: str
    visitor_phone: Optional[str] = None
    visitor_id_number: Optional[str] = None
    host_tenant_id: Optional[UUID] = None
    host_unit_id: Optional[UUID] = None
    purpose: str
    vehicle_plate_number: Optional[str] = None
    entry_time: datetime
    exit_time: Optional[datetime] = None
    logged_by: Optional[UUID] = None
    notes: Optional[str] = None


class VisitorLogListResponse(EmptyStringModel):
    visitor_logs: List[VisitorLogOut]
    total: int


class VisitorLogRequest(CommonQueryParams):
    building_id: Optional[str] = None
    host_tenant_id: Optional[str] = None
    active: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
