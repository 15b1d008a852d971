import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base, JSONType, utc_now


class Building(Base):
    __tablename__ = "buildings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    name = Column(String(200), nullable=False)
    address = Column(JSONType, nullable=True)  # {street, city, region, postalCode}
    building_type = Column(String(24), nullable=False, default="residential")
    total_floors = Column(Integer, nullable=True)
    total_units = Column(Integer, nullable=True)
    status = Column(String(24), nullable=False, default="active")
    manager_id = Column(Uuid, nullable=True)
    settings = Column(JSONType, nullable=True)
    rent_policy = Column(JSONType, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_buildings_org_status", "org_id", "status"),
        Index("ix_buildings_manager", "manager_id"),
    )

    units = relationship("Unit", back_populates="building")
