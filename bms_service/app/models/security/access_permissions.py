import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid

from shared.core.database import Base, JSONType, utc_now


class AccessPermission(Base):
    __tablename__ = "access_permissions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    building_id = Column(Uuid, ForeignKey("buildings.id"), nullable=False)
    entity_type = Column(String(16), nullable=False)  # tenant|visitor|staff
    entity_id = Column(String(64), nullable=False)
    access_level = Column(String(16), nullable=False, default="full")
    # {time_windows: [{day_of_week, start_time, end_time}], areas, requires_escort}
    restrictions = Column(JSONType, nullable=True)
    valid_from = Column(DateTime, nullable=True)
    valid_until = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(Uuid, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("org_id", "building_id", "entity_type", "entity_id",
                         name="uq_access_permissions_entity"),
    )
