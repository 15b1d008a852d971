import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, Uuid

from shared.core.database import Base, JSONType, utc_now


class Complaint(Base):
    __tablename__ = "complaints"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=False)
    unit_id = Column(Uuid, ForeignKey("units.id"), nullable=True)
    category = Column(String(16), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    photos = Column(JSONType, nullable=True)
    priority = Column(String(16), nullable=False, default="medium")
    status = Column(String(16), nullable=False, default="open")
    assigned_to = Column(Uuid, nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    resolution_notes = Column(Text, nullable=True)
    type = Column(String(24), nullable=False, default="complaint")  # complaint|maintenance_request
    maintenance_category = Column(String(16), nullable=True)
    urgency = Column(String(16), nullable=True)
    preferred_time_window = Column(JSONType, nullable=True)  # {start, end}
    linked_work_order_id = Column(Uuid, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_complaints_org_tenant_status", "org_id", "tenant_id", "status"),
        Index("ix_complaints_org_status_priority", "org_id", "status", "priority"),
        Index("ix_complaints_assigned", "assigned_to"),
    )
