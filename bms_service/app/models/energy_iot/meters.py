import uuid
from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base, utc_now


class Meter(Base):
    __tablename__ = "meters"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    building_id = Column(Uuid, ForeignKey("buildings.id"), nullable=False)
    unit_id = Column(Uuid, ForeignKey("units.id"), nullable=True)
    asset_id = Column(Uuid, ForeignKey("assets.id"), nullable=True)
    meter_type = Column(String(16), nullable=False)  # electricity|water|gas
    meter_number = Column(String(64), nullable=False)
    unit = Column(String(16), nullable=False)  # kwh|cubic_meter|liter
    installation_date = Column(DateTime, nullable=True)
    status = Column(String(16), nullable=False, default="active")
    last_reading = Column(Float, nullable=True)
    last_reading_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("org_id", "meter_number",
                         name="uq_meters_org_number"),
        Index("ix_meters_building_type", "building_id", "meter_type"),
    )

    readings = relationship(
        "MeterReading", back_populates="meter", cascade="all, delete-orphan")
