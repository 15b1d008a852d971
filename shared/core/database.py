import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, create_engine
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import sessionmaker, declarative_base
from shared.core.config import DATABASE_URL

Base = declarative_base()

# Nested sub-documents (address, warranty, restrictions, ...) live in JSON
# columns; PostgreSQL stores them as JSONB.
JSONType = JSON().with_variant(JSONB(), "postgresql")

POOL_SIZE = 5
MAX_OVERFLOW = 5


def build_engine(url: str):
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=POOL_SIZE,          # max idle connections
        max_overflow=MAX_OVERFLOW,    # max temporary extra connections
        pool_timeout=30               # wait time before failing
    )


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def utc_now() -> datetime:
    """Naive UTC timestamp; every DateTime column stores UTC without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_id(value) -> Optional[uuid.UUID]:
    """Parse a record id, returning None for anything malformed."""
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (ValueError, AttributeError):
        return None


# Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
