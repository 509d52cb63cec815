"""
Gift model for money received.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel, TimestampMixin


class Gift(TimestampMixin, BaseModel):
    """A single gift entry in an event's ledger."""
    __tablename__ = "gifts"

    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)  # Who gave it
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String(50), nullable=False)  # Payment type, free text
    remark = Column(String(255), nullable=False, default="")

    # Relationships
    event = relationship("Event", back_populates="gifts")
