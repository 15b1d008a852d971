import uuid
from sqlalchemy import Column, DateTime, Index, String, Uuid
from passlib.context import CryptContext

from shared.core.database import Base, JSONType, utc_now

password_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class Users(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # null for SUPER_ADMIN accounts
    org_id = Column(Uuid, nullable=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False, unique=True, index=True)
    phone = Column(String(32), nullable=True)
    password = Column(String(255), nullable=False)
    roles = Column(JSONType, nullable=False, default=list)
    status = Column(String(16), nullable=False, default="active")
    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_users_org_status", "org_id", "status"),
    )

    def set_password(self, password: str):
        self.password = password_context.hash(password)

    def verify_password(self, password: str) -> bool:
        return password_context.verify(password, self.password)

    def has_role(self, role: str) -> bool:
        return role in (self.roles or [])
