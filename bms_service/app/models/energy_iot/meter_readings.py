import uuid
from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base, utc_now


class MeterReading(Base):
    __tablename__ = "meter_readings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    meter_id = Column(Uuid, ForeignKey(
        "meters.id", ondelete="CASCADE"), nullable=False)
    reading = Column(Float, nullable=False)
    reading_date = Column(DateTime, nullable=False)
    read_by = Column(Uuid, nullable=True)
    source = Column(String(16), nullable=False, default="manual")  # manual|iot|import
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_meter_readings_meter_date", "meter_id", "reading_date"),
    )

    meter = relationship("Meter", back_populates="readings")
