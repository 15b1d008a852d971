import uuid
from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Text, Uuid

from shared.core.database import Base, utc_now


class UtilityPayment(Base):
    __tablename__ = "utility_payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    meter_id = Column(Uuid, ForeignKey("meters.id"), nullable=False)
    utility_type = Column(String(16), nullable=False)
    period_start = Column(DateTime, nullable=False)
    period_end = Column(DateTime, nullable=False)
    amount = Column(Float, nullable=False)
    payment_date = Column(DateTime, nullable=False, default=utc_now)
    payment_method = Column(String(24), nullable=False)
    receipt_url = Column(String(512), nullable=True)
    receipt_file_name = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(Uuid, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_utility_payments_meter_date", "meter_id", "payment_date"),
        Index("ix_utility_payments_org_type", "org_id", "utility_type"),
    )
