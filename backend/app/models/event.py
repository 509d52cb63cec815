"""
Event model grouping the gifts received for one occasion.
"""
from sqlalchemy import Column, String, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Event(BaseModel):
    """
    An occasion owned by exactly one user.

    Only a user's default event is ever materialized, but the relation is
    one-to-many so further events need no schema change.
    """
    __tablename__ = "events"
    __table_args__ = (
        UniqueConstraint("user_id", "title", name="uq_events_user_title"),
    )

    title = Column(String(100), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="events")
    gifts = relationship("Gift", back_populates="event")
