from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import Field

from shared.core.schemas import RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.maintenance_assets_enum import MaintenanceType


class PartUsed(EmptyStringModel):
    name: str
    quantity: float = 1
    cost: Optional[float] = Field(default=0, ge=0)


class MaintenanceHistoryCreate(EmptyStringModel):
    maintenance_type: MaintenanceType
    performed_at: Optional[datetime] = None
    performed_by: Optional[str] = None
    description: Optional[str] = None
    cost: Optional[float] = Field(default=None, ge=0)
    parts_used: Optional[List[PartUsed]] = None
    downtime_hours: Optional[float] = Field(default=None, ge=0)
    work_order_id: Optional[UUID] = None
    next_maintenance_date: Optional[datetime] = None


class MaintenanceHistoryOut(RecordOut):
    asset_id: UUID
    maintenance_type: str
    performed_at: datetime
    performed_by: Optional[str] = None
    description: Optional[str] = None
    cost: Optional[float] = None
    parts_used: Optional[List[PartUsed]] = None
    downtime_hours: Optional[float] = None
    work_order_id: Optional[UUID] = None


class MaintenanceHistoryListResponse(EmptyStringModel):
    history: List[MaintenanceHistoryOut]
    total: int
