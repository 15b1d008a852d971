import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base, utc_now


class UserLoginSession(Base):
    __tablename__ = "user_login_sessions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey(
        "users.id", ondelete="CASCADE"), nullable=False, index=True)
    ip_address = Column(String(50), nullable=True)
    user_agent = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utc_now)
    last_accessed_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    user = relationship("Users", backref="login_sessions")
