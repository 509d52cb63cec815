"""
Pydantic schemas for User entity and session identity.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional


class UserCredentials(BaseModel):
    """Schema for registration and login."""
    username: Optional[str] = None
    password: Optional[str] = None


class PasswordChange(BaseModel):
    """Schema for password change."""
    model_config = ConfigDict(populate_by_name=True)

    old_password: Optional[str] = Field(None, alias="oldPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class TokenIdentity(BaseModel):
    """Identity claim carried by a verified session token."""
    user_id: int
    username: str
    claims: Dict[str, Any] = {}
