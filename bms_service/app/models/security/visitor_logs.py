import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, Uuid

from shared.core.database import Base, utc_now


class VisitorLog(Base):
    __tablename__ = "visitor_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    building_id = Column(Uuid, ForeignKey("buildings.id"), nullable=False)
    visitor_name = Column(String(200), nullable=False)
    visitor_phone = Column(String(32), nullable=True)
    visitor_id_number = Column(String(64), nullable=True)
    host_tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=True)
    host_unit_id = Column(Uuid, ForeignKey("units.id"), nullable=True)
    purpose = Column(String(200), nullable=False)
    vehicle_plate_number = Column(String(32), nullable=True)
    entry_time = Column(DateTime, nullable=False, default=utc_now)
    exit_time = Column(DateTime, nullable=True)
    logged_by = Column(Uuid, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_visitor_logs_org_building_entry",
              "org_id", "building_id", "entry_time"),
    )
