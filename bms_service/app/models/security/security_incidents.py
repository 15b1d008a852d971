import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, Uuid

from shared.core.database import Base, JSONType, utc_now


class SecurityIncident(Base):
    __tablename__ = "security_incidents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    building_id = Column(Uuid, ForeignKey("buildings.id"), nullable=False)
    unit_id = Column(Uuid, ForeignKey("units.id"), nullable=True)
    incident_type = Column(String(32), nullable=False)
    severity = Column(String(16), nullable=False, default="medium")
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(200), nullable=True)
    reported_by = Column(Uuid, nullable=True)
    reported_at = Column(DateTime, nullable=False, default=utc_now)
    involved_parties = Column(JSONType, nullable=True)
    status = Column(String(32), nullable=False, default="reported")
    resolved_at = Column(DateTime, nullable=True)
    resolution_notes = Column(Text, nullable=True)
    resolved_by = Column(Uuid, nullable=True)
    photos = Column(JSONType, nullable=True)
    documents = Column(JSONType, nullable=True)
    linked_visitor_log_id = Column(Uuid, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_security_incidents_org_building_status",
              "org_id", "building_id", "status"),
        Index("ix_security_incidents_reported_at", "reported_at"),
    )
