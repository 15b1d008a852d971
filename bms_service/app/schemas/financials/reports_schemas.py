from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class AgingInvoice(EmptyStringModel):
    invoice_id: UUID
    invoice_number: str
    tenant_id: UUID
    amount: float
    due_date: datetime
    days_overdue: int


class AgingBucket(EmptyStringModel):
    bucket: str
    label: str
    total: float
    invoice_count: int
    invoices: List[AgingInvoice]


class AgingReport(EmptyStringModel):
    as_of: datetime
    buckets: List[AgingBucket]
    total_receivables: float
    total_invoice_count: int


class AgingRequest(EmptyStringModel):
    as_of: Optional[datetime] = None
    building_id: Optional[str] = None
    tenant_id: Optional[str] = None
    organization_id: Optional[str] = None


class FinancialReport(EmptyStringModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    total_invoiced: float
    total_collected: float
    outstanding: float
    collection_rate: float
    payments_by_method: Dict[str, float]
    invoices_by_status: Dict[str, int]


class FinancialRequest(EmptyStringModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    building_id: Optional[str] = None
    organization_id: Optional[str] = None


class BuildingOccupancy(EmptyStringModel):
    building_id: UUID
    building_name: str
    total_units: int
    units_by_status: Dict[str, int]
    occupancy_rate: float


class OccupancyReport(EmptyStringModel):
    buildings: List[BuildingOccupancy]
    total_units: int
    occupied_units: int
    occupancy_rate: float


class ExportRequest(EmptyStringModel):
    format: str = "csv"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    as_of: Optional[datetime] = None
    building_id: Optional[str] = None
    tenant_id: Optional[str] = None
    status: Optional[str] = None
    organization_id: Optional[str] = None
