"""
Shared FastAPI dependencies.

Configuration, the session verifier and the store are all taken from
``app.state`` so each application instance carries its own.
"""
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from typing import Optional
from app.core.config import Settings
from app.core.security import SessionVerifier
from app.db.session import get_db
from app.schemas.user import TokenIdentity
from app.services.audit_service import AuditLog
from app.services.event_service import EventResolver
from app.services.gift_service import GiftLedger
from app.services.identity_service import IdentityService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_verifier(request: Request) -> SessionVerifier:
    return request.app.state.session_verifier


def get_current_identity(
    authorization: Optional[str] = Header(None),
    verifier: SessionVerifier = Depends(get_session_verifier)
) -> TokenIdentity:
    """Identity of the caller, taken from the ``Authorization: Bearer`` header."""
    return verifier.verify(authorization)


def get_identity_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> IdentityService:
    return IdentityService(db, settings)


def get_gift_ledger(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> GiftLedger:
    return GiftLedger(
        db,
        EventResolver(db, settings.DEFAULT_EVENT_TITLE),
        AuditLog(db),
        settings.DEFAULT_GIFT_TYPE
    )
