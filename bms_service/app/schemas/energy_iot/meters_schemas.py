from datetime import datetime
from typing import List, Optional
from uuid import UUID

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.energy_iot_enum import MeterStatus, MeterType, MeterUnit


class MeterBase(EmptyStringModel):
    building_id: UUID
    unit_id: Optional[UUID] = None
    asset_id: Optional[UUID] = None
    meter_type: MeterType
    meter_number: str
    unit: MeterUnit
    installation_date: Optional[datetime] = None
    status: MeterStatus = MeterStatus.active


class MeterCreate(MeterBase):
    pass


class MeterUpdate(EmptyStringModel):
    unit_id: Optional[UUID] = None
    asset_id: Optional[UUID] = None
    meter_type: Optional[MeterType] = None
    meter_number: Optional[str] = None
    unit: Optional[MeterUnit] = None
    installation_date: Optional[datetime] = None
    status: Optional[MeterStatus] = None


class MeterOut(RecordOut):
    building_id: UUID
    unit_id: Optional[UUID] = None
    asset_id: Optional[UUID] = None
    meter_type: str
    meter_number: str
    unit: str
    installation_date: Optional[datetime] = None
    status: str
    last_reading: Optional[float] = None
    last_reading_date: Optional[datetime] = None


class MeterListResponse(EmptyStringModel):
    meters: List[MeterOut]
    total: int


class MeterRequest(CommonQueryParams):
    building_id: Optional[str] = None
    unit_id: Optional[str] = None
    meter_type: Optional[str] = None
    status: Optional[str] = None
