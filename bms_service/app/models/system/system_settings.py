import uuid
from sqlalchemy import Column, DateTime, Uuid

from shared.core.database import Base, JSONType, utc_now


class SystemSetting(Base):
    __tablename__ = "system_settings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    general = Column(JSONType, nullable=True)
    security = Column(JSONType, nullable=True)
    notifications = Column(JSONType, nullable=True)
    maintenance = Column(JSONType, nullable=True)
    integrations = Column(JSONType, nullable=True)
    updated_by = Column(Uuid, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)
