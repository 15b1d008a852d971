import uuid
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, String, Text, Uuid

from shared.core.database import Base, JSONType, utc_now


class MaintenanceTask(Base):
    __tablename__ = "maintenance_tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    asset_id = Column(Uuid, ForeignKey("assets.id"), nullable=True)
    building_id = Column(Uuid, ForeignKey("buildings.id"), nullable=True)
    task_name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    schedule_type = Column(String(16), nullable=False)  # time-based|usage-based
    frequency = Column(JSONType, nullable=True)  # {interval, unit}
    usage_threshold = Column(Float, nullable=True)
    estimated_duration = Column(Float, nullable=True)  # hours
    estimated_cost = Column(Float, nullable=True)
    assigned_to = Column(Uuid, nullable=True)
    last_performed = Column(DateTime, nullable=True)
    next_due_date = Column(DateTime, nullable=True)
    status = Column(String(16), nullable=False, default="pending")
    auto_generate_work_order = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_maintenance_tasks_org_status_due",
              "org_id", "status", "next_due_date"),
        Index("ix_maintenance_tasks_asset", "asset_id"),
    )
