"""
Pydantic schemas for Gift entity.
"""
from pydantic import BaseModel, ConfigDict, field_serializer, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal


class GiftCreate(BaseModel):
    """Schema for gift creation. Presence of name and amount is checked by the ledger."""
    name: Optional[str] = None
    amount: Optional[Decimal] = None
    type: Optional[str] = None
    remark: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def blank_amount_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class GiftResponse(BaseModel):
    """Schema for gift response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_id: int
    name: str
    amount: Decimal
    type: str
    remark: str
    created_at: datetime

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)
