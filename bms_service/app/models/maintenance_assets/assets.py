import uuid
from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base, JSONType, utc_now


class Asset(Base):
    __tablename__ = "assets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    building_id = Column(Uuid, ForeignKey("buildings.id"), nullable=False)
    unit_id = Column(Uuid, ForeignKey("units.id"), nullable=True)
    name = Column(String(200), nullable=False)
    asset_type = Column(String(64), nullable=False)
    status = Column(String(16), nullable=False, default="active")
    serial_number = Column(String(128), nullable=True)
    model = Column(String(128), nullable=True)
    manufacturer = Column(String(128), nullable=True)
    purchase_date = Column(DateTime, nullable=True)
    purchase_price = Column(Float, nullable=True)
    current_value = Column(Float, nullable=True)
    location = Column(String(200), nullable=True)
    warranty = Column(JSONType, nullable=True)
    depreciation = Column(JSONType, nullable=True)
    maintenance_schedule = Column(JSONType, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_assets_org_building_status", "org_id", "building_id", "status"),
    )

    history = relationship(
        "MaintenanceHistory", back_populates="asset", cascade="all, delete-orphan")
