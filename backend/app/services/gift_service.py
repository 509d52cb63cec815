"""
Gift ledger service for gift-related business logic.

Every operation is scoped to the caller's default event, and every mutation
commits its log entry in the same transaction as the gift change.
"""
import logging
from decimal import Decimal
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.exceptions import Forbidden, NoRecords, NotFound, ValidationError
from app.models.event import Event
from app.models.gift import Gift
from app.services.audit_service import AuditLog
from app.services.event_service import EventResolver

logger = logging.getLogger(__name__)


class GiftLedger:
    """Create, list, delete and clear gifts owned by one user."""

    def __init__(
        self,
        db: Session,
        events: EventResolver,
        audit: AuditLog,
        default_type: str
    ):
        self.db = db
        self.events = events
        self.audit = audit
        self.default_type = default_type

    def list(self, user_id: int) -> List[Gift]:
        """Gifts in the user's default event, newest first."""
        event_id = self.events.resolve_default_event(user_id)
        return self.db.query(Gift).filter(
            Gift.event_id == event_id
        ).order_by(Gift.created_at.desc(), Gift.id.desc()).all()

    def add(
        self,
        user_id: int,
        name: Optional[str],
        amount: Optional[Decimal],
        type: Optional[str] = None,
        remark: Optional[str] = None
    ) -> Gift:
        """Record a gift under the user's default event."""
        if not name or amount is None:
            raise ValidationError("Name and amount are required")

        event_id = self.events.resolve_default_event(user_id)

        gift = Gift(
            event_id=event_id,
            name=name,
            amount=amount,
            type=type or self.default_type,
            remark=remark or ""
        )
        self.db.add(gift)
        self.audit.record(user_id, event_id, f"Added gift record: {name} - {amount}")
        self.db.commit()
        self.db.refresh(gift)

        logger.info(f"User {user_id} added gift {gift.id} to event {event_id}")
        return gift

    def delete(self, user_id: int, gift_id: int) -> None:
        """Delete one gift after checking that the user owns its event."""
        row = self.db.query(Gift, Event.user_id).outerjoin(
            Event, Gift.event_id == Event.id
        ).filter(Gift.id == gift_id).first()

        if row is None:
            raise NotFound("Record not found")

        gift, owner_id = row
        if owner_id != user_id:
            logger.warning(f"User {user_id} tried to delete gift {gift_id} owned by user {owner_id}")
            raise Forbidden("No permission to delete this record")

        event_id = gift.event_id
        deleted = self.db.query(Gift).filter(Gift.id == gift_id).delete(synchronize_session=False)
        if not deleted:
            # Removed by another request after the ownership check
            self.db.rollback()
            raise NotFound("Record not found")

        self.audit.record(user_id, event_id, f"Deleted gift record ID: {gift_id}")
        self.db.commit()
        logger.info(f"User {user_id} deleted gift {gift_id} from event {event_id}")

    def clear(self, user_id: int) -> int:
        """Delete every gift in the user's default event; returns how many went."""
        event = self.events.find_default_event(user_id)
        if event is None:
            raise NoRecords("No records to clear")

        event_id = event.id
        count = self.db.query(Gift).filter(Gift.event_id == event_id).delete(synchronize_session=False)
        if count == 0:
            self.db.rollback()
            raise NoRecords("Ledger is already empty")

        self.audit.record(user_id, event_id, f"Cleared all gift records ({count})")
        self.db.commit()
        logger.info(f"User {user_id} cleared {count} gifts from event {event_id}")
        return count
