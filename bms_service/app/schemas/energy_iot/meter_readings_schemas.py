from datetime import datetime
from typing import List, Optional
from uuid import UUID

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.energy_iot_enum import ReadingSource


class MeterReadingCreate(EmptyStringModel):
    meter_id: UUID
    reading: float
    reading_date: Optional[datetime] = None
    source: ReadingSource = ReadingSource.manual
    notes: Optional[str] = None
    # accept a lower value than the meter's last reading (corrections)
    allow_decrease: bool = False


class MeterReadingUpdate(EmptyStringModel):
    reading: Optional[float] = None
    reading_date: Optional[datetime] = None
    source: Optional[ReadingSource] = None
    notes: Optional[str] = None
    allow_decrease: bool = False


class MeterReadingOut(RecordOut):
    meter_id: UUID
    reading: float
    reading_date: datetime
    read_by: Optional[UUID] = None
    source: str
    notes: Optional[str] = None


class MeterReadingListResponse(EmptyStringModel):
    readings: List[MeterReadingOut]
    total: int


class MeterReadingRequest(CommonQueryParams):
    meter_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ConsumptionOut(EmptyStringModel):
    meter_id: UUID
    start_date: datetime
    end_date: datetime
    consumption: Optional[float] = None
    unit: str
