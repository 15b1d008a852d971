import uuid
from sqlalchemy import Column, DateTime, String, Uuid

from shared.core.database import Base, JSONType, utc_now


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    code = Column(String(64), nullable=False, unique=True)
    contact_info = Column(JSONType, nullable=True)  # {email, phone, address}
    settings = Column(JSONType, nullable=True)
    status = Column(String(16), nullable=False, default="active")
    domain = Column(String(255), nullable=True, unique=True)
    subdomain = Column(String(100), nullable=True, unique=True)
    branding = Column(JSONType, nullable=True)
    payment_reminder_settings = Column(JSONType, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)
