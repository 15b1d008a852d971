from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import Field

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.maintenance_assets_enum import WorkOrderCategory, WorkOrderPriority, WorkOrderStatus


class WorkOrderBase(EmptyStringModel):
    building_id: UUID
    complaint_id: Optional[UUID] = None
    unit_id: Optional[UUID] = None
    asset_id: Optional[UUID] = None
    maintenance_task_id: Optional[UUID] = None
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[WorkOrderCategory] = None
    priority: WorkOrderPriority = WorkOrderPriority.medium
    assigned_to: Optional[UUID] = None
    estimated_cost: Optional[float] = Field(default=None, ge=0)
    scheduled_date: Optional[datetime] = None
    notes: Optional[str] = None
    photos: Optional[List[str]] = None


class WorkOrderCreate(WorkOrderBase):
    pass


class WorkOrderUpdate(EmptyStringModel):
    unit_id: Optional[UUID] = None
    asset_id: Optional[UUID] = None
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[WorkOrderCategory] = None
    priority: Optional[WorkOrderPriority] = None
    status: Optional[WorkOrderStatus] = None
    assigned_to: Optional[UUID] = None
    estimated_cost: Optional[float] = Field(default=None, ge=0)
    actual_cost: Optional[float] = Field(default=None, ge=0)
    scheduled_date: Optional[datetime] = None
    notes: Optional[str] = None
    photos: Optional[List[str]] = None


class WorkOrderStatusUpdate(EmptyStringModel):
    status: WorkOrderStatus
    assigned_to: Optional[UUID] = None


class WorkOrderComplete(EmptyStringModel):
    actual_cost: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class WorkOrderOut(RecordOut):
    building_id: UUID
    complaint_id: Optional[UUID] = None
    unit_id: Optional[UUID] = None
    asset_id: Optional[UUID] = None
    maintenance_task_id: Optional[UUID] = None
    title: str
    description: str
    category: str
    priority: str
    status: str
    assigned_to: Optional[UUID] = None
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    scheduled_date: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    photos: Optional[List[str]] = None
    created_by: Optional[UUID] = None


class WorkOrderListResponse(EmptyStringModel):
    work_orders: List[WorkOrderOut]
    total: int


class WorkOrderRequest(CommonQueryParams):
    building_id: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    assigned_to: Optional[str] = None
