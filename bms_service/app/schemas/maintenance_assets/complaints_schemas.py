from datetime import datetime
from typing import List, Optional
from uuid import UUID

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.maintenance_assets_enum import (
    ComplaintCategory, ComplaintPriority, ComplaintStatus, ComplaintType, MaintenanceCategory,
    Urgency, WorkOrderCategory, WorkOrderPriority
)
from .work_orders_schemas import WorkOrderOut


class PreferredTimeWindow(EmptyStringModel):
    start: datetime
    end: datetime


class ComplaintCreate(EmptyStringModel):
    # resolved from the caller's tenant profile for tenant users
    tenant_id: Optional[UUID] = None
    unit_id: Optional[UUID] = None
    category: Optional[ComplaintCategory] = None
    title: Optional[str] = None
    description: Optional[str] = None
    photos: Optional[List[str]] = None
    priority: ComplaintPriority = ComplaintPriority.medium
    type: ComplaintType = ComplaintType.complaint
    maintenance_category: Optional[MaintenanceCategory] = None
    urgency: Optional[Urgency] = None
    preferred_time_window: Optional[PreferredTimeWindow] = None


class ComplaintUpdate(EmptyStringModel):
    unit_id: Optional[UUID] = None
    category: Optional[ComplaintCategory] = None
    title: Optional[str] = None
    description: Optional[str] = None
    photos: Optional[List[str]] = None
    priority: Optional[ComplaintPriority] = None
    status: Optional[ComplaintStatus] = None
    assigned_to: Optional[UUID] = None
    resolution_notes: Optional[str] = None
    maintenance_category: Optional[MaintenanceCategory] = None
    urgency: Optional[Urgency] = None
    preferred_time_window: Optional[PreferredTimeWindow] = None


class ComplaintOut(RecordOut):
    tenant_id: UUID
    unit_id: Optional[UUID] = None
    category: str
    title: str
    description: str
    photos: Optional[List[str]] = None
    priority: str
    status: str
    assigned_to: Optional[UUID] = None
    resolved_at: Optional[datetime] = None
    resolution_notes: Optional[str] = None
    type: str
    maintenance_category: Optional[str] = None
    urgency: Optional[str] = None
    preferred_time_window: Optional[PreferredTimeWindow] = None
    linked_work_order_id: Optional[UUID] = None


class ComplaintListResponse(EmptyStringModel):
    complaints: List[ComplaintOut]
    total: int


class ComplaintRequest(CommonQueryParams):
    tenant_id: Optional[str] = None
    unit_id: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    assigned_to: Optional[str] = None


class ConvertToWorkOrderRequest(EmptyStringModel):
    building_id: Optional[UUID] = None
    priority: Optional[WorkOrderPriority] = None
    category: Optional[WorkOrderCategory] = None
    assigned_to: Optional[UUID] = None
    scheduled_date: Optional[datetime] = None


class ConvertToWorkOrderResponse(EmptyStringModel):
    message: str
    work_order: WorkOrderOut
