import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, Uuid

from shared.core.database import Base, JSONType, utc_now


class SecurityStaff(Base):
    __tablename__ = "security_staff"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    building_id = Column(Uuid, ForeignKey("buildings.id"), nullable=True)
    assigned_buildings = Column(JSONType, nullable=True)  # [buildingId]
    employee_id = Column(String(64), nullable=True)
    badge_number = Column(String(64), nullable=True)
    hire_date = Column(DateTime, nullable=True)
    emergency_contact = Column(JSONType, nullable=True)
    certifications = Column(JSONType, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("org_id", "user_id", name="uq_security_staff_user"),
    )
