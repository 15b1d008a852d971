import uuid
from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base, JSONType, utc_now


class Lease(Base):
    __tablename__ = "leases"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=False)
    unit_id = Column(Uuid, ForeignKey("units.id"), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    rent_amount = Column(Float, nullable=False)
    deposit_amount = Column(Float, nullable=True)
    billing_cycle = Column(String(16), nullable=False, default="monthly")
    due_day = Column(Integer, nullable=False, default=1)
    additional_charges = Column(JSONType, nullable=True)  # [{name, amount, frequency}]
    status = Column(String(16), nullable=False, default="active")
    termination_date = Column(DateTime, nullable=True)
    termination_reason = Column(Text, nullable=True)
    rent_breakdown = Column(JSONType, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_leases_org_status", "org_id", "status"),
        Index("ix_leases_unit_status", "unit_id", "status"),
        Index("ix_leases_tenant", "tenant_id"),
    )

    tenant = relationship("Tenant")
    unit = relationship("Unit")
