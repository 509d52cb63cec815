"""
Event resolution: maps a user to their single default event.
"""
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
from app.core.exceptions import StorageFailure
from app.models.event import Event

logger = logging.getLogger(__name__)


class EventResolver:
    """
    Find-or-create of the per-user default event.

    Two first-time requests for the same user can both miss the lookup and
    both insert. The ``uq_events_user_title`` constraint makes the second
    insert fail; the loser rolls back and re-reads the winner's row, so every
    caller converges on one event.
    """

    def __init__(self, db: Session, default_title: str):
        self.db = db
        self.default_title = default_title

    def find_default_event(self, user_id: int) -> Optional[Event]:
        """Get the user's default event without creating it."""
        return self.db.query(Event).filter(
            Event.user_id == user_id,
            Event.title == self.default_title
        ).order_by(Event.id).first()

    def resolve_default_event(self, user_id: int) -> int:
        """Get or create the user's default event and return its id."""
        event = self.find_default_event(user_id)
        if event is not None:
            return event.id

        self.db.add(Event(title=self.default_title, user_id=user_id))
        try:
            self.db.commit()
            logger.info(f"Created default event for user {user_id}")
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Default event for user {user_id} was created concurrently, re-reading")

        event = self.find_default_event(user_id)
        if event is None:
            raise StorageFailure(f"default event for user {user_id} could not be resolved")
        return event.id
