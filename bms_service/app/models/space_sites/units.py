import uuid
from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base, utc_now


class Unit(Base):
    __tablename__ = "units"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    building_id = Column(Uuid, ForeignKey("buildings.id"), nullable=False)
    unit_number = Column(String(32), nullable=False)
    floor = Column(Integer, nullable=True)
    unit_type = Column(String(24), nullable=False, default="apartment")
    area = Column(Float, nullable=True)  # square meters
    bedrooms = Column(Integer, nullable=True)
    bathrooms = Column(Integer, nullable=True)
    status = Column(String(16), nullable=False, default="available")
    rent_amount = Column(Float, nullable=True)
    rate_per_sqm_override = Column(Float, nullable=True)
    flat_rent_override = Column(Float, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("building_id", "unit_number",
                         name="uq_units_building_number"),
        Index("ix_units_org_building_status", "org_id", "building_id", "status"),
    )

    building = relationship("Building", back_populates="units")
