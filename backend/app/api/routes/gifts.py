"""
Gift ledger routes.
"""
from fastapi import APIRouter, Depends
from app.api.dependencies import get_current_identity, get_gift_ledger
from app.core.exceptions import NotFound
from app.core.utils import format_response
from app.schemas.gift import GiftCreate, GiftResponse
from app.schemas.user import TokenIdentity
from app.services.gift_service import GiftLedger

router = APIRouter(prefix="/gifts", tags=["gifts"])


@router.get("")
def list_gifts(
    current: TokenIdentity = Depends(get_current_identity),
    ledger: GiftLedger = Depends(get_gift_ledger)
):
    """List the caller's gifts, newest first."""
    gifts = ledger.list(current.user_id)
    return format_response(
        "Fetched successfully",
        data=[GiftResponse.model_validate(gift).model_dump(mode="json") for gift in gifts]
    )


@router.post("")
def add_gift(
    gift_data: GiftCreate,
    current: TokenIdentity = Depends(get_current_identity),
    ledger: GiftLedger = Depends(get_gift_ledger)
):
    """Record a new gift."""
    ledger.add(
        current.user_id,
        gift_data.name,
        gift_data.amount,
        type=gift_data.type,
        remark=gift_data.remark
    )
    return format_response("Added successfully")


@router.post("/clear")
def clear_gifts(
    current: TokenIdentity = Depends(get_current_identity),
    ledger: GiftLedger = Depends(get_gift_ledger)
):
    """Delete all of the caller's gifts."""
    ledger.clear(current.user_id)
    return format_response("Cleared successfully")


@router.delete("/{gift_id}")
def delete_gift(
    gift_id: str,
    current: TokenIdentity = Depends(get_current_identity),
    ledger: GiftLedger = Depends(get_gift_ledger)
):
    """Delete one gift owned by the caller."""
    if not gift_id.isdecimal():
        # Nothing can have a non-numeric id
        raise NotFound("Record not found")
    ledger.delete(current.user_id, int(gift_id))
    return format_response("Deleted successfully")
