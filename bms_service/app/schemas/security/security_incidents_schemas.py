from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.security_enum import IncidentSeverity, IncidentStatus, IncidentType


class SecurityIncidentBase(EmptyStringModel):
    building_id: UUID
    unit_id: Optional[UUID] = None
    incident_type: IncidentType
    severity: IncidentSeverity = IncidentSeverity.medium
    title: str
    description: str
    location: Optional[str] = None
    reported_at: Optional[datetime] = None
    involved_parties: Optional[List[Any]] = None
    photos: Optional[List[str]] = None
    documents: Optional[List[str]] = None
    linked_visitor_log_id: Optional[UUID] = None


class SecurityIncidentCreate(SecurityIncidentBase):
    pass


class SecurityIncidentUpdate(EmptyStringModel):
    unit_id: Optional[UUID] = None
    incident_type: Optional[IncidentType] = None
    severity: Optional[IncidentSeverity] = None
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    involved_parties: Optional[List[Any]] = None
    status: Optional[IncidentStatus] = None
    resolution_notes: Optional[str] = None
    photos: Optional[List[str]] = None
    documents: Optional[List[str]] = None
    linked_visitor_log_id: Optional[UUID] = None


class SecurityIncidentOut(RecordOut):
    building_id: UUID
    unit_id: Optional[UUID] = None
    incident_type: str
    severity: str
    title: str
    description: str
    location: Optional[str] = None
    reported_by: Optional[UUID] = None
    reported_at: datetime
    involved_parties: Optional[List[Any]] = None
    status: str
    resolved_at: Optional[datetime] = None
    resolution_notes: Optional[str] = None
    resolved_by: Optional[UUID] = None
    photos: Optional[List[str]] = None
    documents: Optional[List[str]] = None
    linked_visitor_log_id: Optional[UUID] = None


class SecurityIncidentListResponse(EmptyStringModel):
    incidents: List[SecurityIncidentOut]
    total: int


class SecurityIncidentRequest(CommonQueryParams):
    building_id: Optional[str] = None
    status: Optional[str] = None
    severity: Optional[str] = None
    incident_type: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
