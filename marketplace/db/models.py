"""SQLAlchemy models mirroring the JSON state files."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, JSON, func

from .session import Base


class ResourceState(Base):
    """Whole state of one resource type: its id counter and its records."""

    __tablename__ = "resource_state"

    key = Column(String(64), primary_key=True)
    next_id = Column(Integer, nullable=False, default=1)
    items = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
