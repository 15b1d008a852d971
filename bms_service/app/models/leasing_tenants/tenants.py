import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, UniqueConstraint, Uuid

from shared.core.database import Base, JSONType, utc_now


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    primary_phone = Column(String(32), nullable=False)
    email = Column(String(200), nullable=True)
    national_id = Column(String(64), nullable=True)
    language = Column(String(4), nullable=False, default="en")
    status = Column(String(16), nullable=False, default="active")
    emergency_contact = Column(JSONType, nullable=True)  # {name, phone}
    notes = Column(Text, nullable=True)
    notification_preferences = Column(JSONType, nullable=True)
    user_id = Column(Uuid, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("org_id", "primary_phone",
                         name="uq_tenants_org_phone"),
        Index("ix_tenants_org_status", "org_id", "status"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
