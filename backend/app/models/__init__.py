"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User
from app.models.event import Event
from app.models.gift import Gift
from app.models.log import LogEntry

__all__ = [
    "User",
    "Event",
    "Gift",
    "LogEntry",
]
