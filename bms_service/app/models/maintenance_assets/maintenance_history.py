import uuid
from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base, JSONType, utc_now


class MaintenanceHistory(Base):
    __tablename__ = "maintenance_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    asset_id = Column(Uuid, ForeignKey(
        "assets.id", ondelete="CASCADE"), nullable=False)
    maintenance_type = Column(String(16), nullable=False)
    performed_at = Column(DateTime, nullable=False)
    performed_by = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    cost = Column(Float, nullable=True)
    parts_used = Column(JSONType, nullable=True)  # [{name, quantity, cost}]
    downtime_hours = Column(Float, nullable=True)
    work_order_id = Column(Uuid, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_maintenance_history_asset_date", "asset_id", "performed_at"),
    )

    asset = relationship("Asset", back_populates="history")
