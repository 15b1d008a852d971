from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import Field

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.maintenance_assets_enum import FrequencyUnit, MaintenanceTaskStatus, ScheduleType


class Frequency(EmptyStringModel):
    interval: int = Field(gt=0)
    unit: FrequencyUnit


class MaintenanceTaskBase(EmptyStringModel):
    asset_id: Optional[UUID] = None
    building_id: Optional[UUID] = None
    task_name: Optional[str] = None
    description: Optional[str] = None
    schedule_type: Optional[ScheduleType] = None
    frequency: Optional[Frequency] = None
    usage_threshold: Optional[float] = Field(default=None, gt=0)
    estimated_duration: Optional[float] = Field(default=None, ge=0)
    estimated_cost: Optional[float] = Field(default=None, ge=0)
    assigned_to: Optional[UUID] = None
    last_performed: Optional[datetime] = None
    next_due_date: Optional[datetime] = None
    auto_generate_work_order: bool = False


class MaintenanceTaskCreate(MaintenanceTaskBase):
    pass


class MaintenanceTaskUpdate(EmptyStringModel):
    asset_id: Optional[UUID] = None
    building_id: Optional[UUID] = None
    task_name: Optional[str] = None
    description: Optional[str] = None
    schedule_type: Optional[ScheduleType] = None
    frequency: Optional[Frequency] = None
    usage_threshold: Optional[float] = Field(default=None, gt=0)
    estimated_duration: Optional[float] = Field(default=None, ge=0)
    estimated_cost: Optional[float] = Field(default=None, ge=0)
    assigned_to: Optional[UUID] = None
    next_due_date: Optional[datetime] = None
    status: Optional[MaintenanceTaskStatus] = None
    auto_generate_work_order: Optional[bool] = None


class MaintenanceTaskComplete(EmptyStringModel):
    performed_at: Optional[datetime] = None


class MaintenanceTaskOut(RecordOut):
    asset_id: Optional[UUID] = None
    building_id: Optional[UUID] = None
    task_name: str
    description: str
    schedule_type: str
    frequency: Optional[Frequency] = None
    usage_threshold: Optional[float] = None
    estimated_duration: Optional[float] = None
    estimated_cost: Optional[float] = None
    assigned_to: Optional[UUID] = None
    last_performed: Optional[datetime] = None
    next_due_date: Optional[datetime] = None
    status: str
    auto_generate_work_order: bool


class MaintenanceTaskListResponse(EmptyStringModel):
    maintenance_tasks: List[MaintenanceTaskOut]
    total: int


class MaintenanceTaskRequest(CommonQueryParams):
    asset_id: Optional[str] = None
    building_id: Optional[str] = None
    status: Optional[str] = None
    schedule_type: Optional[str] = None


class GeneratedWorkOrders(EmptyStringModel):
    created: int
    work_order_ids: List[UUID]
