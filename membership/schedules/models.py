"""SQLAlchemy models for schedules (shifts)."""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from membership.db import Base


class Schedule(Base):
    """A named time slot students can be assigned to."""

    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
