"""
Audit log service. Entries are appended inside the caller's transaction.
"""
from sqlalchemy.orm import Session
from typing import List, Optional
from app.models.log import LogEntry


class AuditLog:
    """Append-only record of mutating ledger actions."""

    def __init__(self, db: Session):
        self.db = db

    def record(self, user_id: int, event_id: int, action: str) -> LogEntry:
        """Stage a log entry; it is written when the caller commits."""
        entry = LogEntry(user_id=user_id, event_id=event_id, action=action)
        self.db.add(entry)
        return entry

    def entries(self, user_id: int, event_id: Optional[int] = None) -> List[LogEntry]:
        """
        Read side of the log: a user's entries, oldest first.

        Optionally narrowed to one event.
        """
        query = self.db.query(LogEntry).filter(LogEntry.user_id == user_id)
        if event_id is not None:
            query = query.filter(LogEntry.event_id == event_id)
        return query.order_by(LogEntry.id).all()
