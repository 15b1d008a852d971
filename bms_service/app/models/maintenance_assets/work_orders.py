import uuid
from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Text, Uuid

from shared.core.database import Base, JSONType, utc_now


class WorkOrder(Base):
    __tablename__ = "work_orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    building_id = Column(Uuid, ForeignKey("buildings.id"), nullable=False)
    complaint_id = Column(Uuid, nullable=True)
    unit_id = Column(Uuid, ForeignKey("units.id"), nullable=True)
    asset_id = Column(Uuid, ForeignKey("assets.id"), nullable=True)
    maintenance_task_id = Column(Uuid, ForeignKey(
        "maintenance_tasks.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(16), nullable=False)
    priority = Column(String(16), nullable=False, default="medium")
    status = Column(String(16), nullable=False, default="open")
    assigned_to = Column(Uuid, nullable=True)
    estimated_cost = Column(Float, nullable=True)
    actual_cost = Column(Float, nullable=True)
    scheduled_date = Column(DateTime, nullable=True)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    photos = Column(JSONType, nullable=True)
    created_by = Column(Uuid, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_work_orders_org_status", "org_id", "status"),
        Index("ix_work_orders_building", "building_id"),
        Index("ix_work_orders_assigned", "assigned_to"),
    )
