import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid

from shared.core.database import Base, utc_now


class FeatureFlag(Base):
    __tablename__ = "feature_flags"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    key = Column(String(100), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    enabled = Column(Boolean, nullable=False, default=False)
    # null = global flag
    org_id = Column(Uuid, ForeignKey("organizations.id"), nullable=True)
    rollout_percentage = Column(Integer, nullable=False, default=100)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("key", "org_id", name="uq_feature_flags_key_org"),
    )
