"""
Append-only action log.
"""
from sqlalchemy import Column, String, ForeignKey, Integer
from app.db.base import BaseModel, TimestampMixin


class LogEntry(TimestampMixin, BaseModel):
    """One mutating action performed by a user on an event. Never updated or deleted."""
    __tablename__ = "logs"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    action = Column(String(255), nullable=False)
