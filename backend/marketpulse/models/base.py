from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Integer, inspect
from sqlalchemy.orm import declarative_mixin


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@declarative_mixin
class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

@declarative_mixin
class IdMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)


def primary_key(record):
    """Identity of a persisted record without triggering an attribute load."""
    identity = inspect(record).identity
    return identity[0] if identity else None
