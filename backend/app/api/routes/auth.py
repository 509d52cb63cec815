"""
Authentication routes for register, login, password change and token check.
"""
from fastapi import APIRouter, Depends
from app.api.dependencies import get_current_identity, get_identity_service
from app.core.utils import format_response
from app.schemas.user import PasswordChange, TokenIdentity, UserCredentials, UserResponse
from app.services.identity_service import IdentityService

router = APIRouter(tags=["auth"])


@router.post("/register")
def register(
    credentials: UserCredentials,
    identity: IdentityService = Depends(get_identity_service)
):
    """Register a new user."""
    identity.register(credentials.username, credentials.password)
    return format_response("Registration successful, please log in")


@router.post("/login")
def login(
    credentials: UserCredentials,
    identity: IdentityService = Depends(get_identity_service)
):
    """Login and get JWT token."""
    token, user = identity.authenticate(credentials.username, credentials.password)
    return format_response(
        "Login successful",
        token=token,
        user=UserResponse.model_validate(user).model_dump()
    )


@router.post("/change-password")
def change_password(
    passwords: PasswordChange,
    current: TokenIdentity = Depends(get_current_identity),
    identity: IdentityService = Depends(get_identity_service)
):
    """Change the caller's password. Existing tokens are not revoked."""
    identity.change_password(current.user_id, passwords.old_password, passwords.new_password)
    return format_response("Password changed, please log in again")


@router.get("/verify")
def verify(current: TokenIdentity = Depends(get_current_identity)):
    """Check the caller's token and echo its claim."""
    return format_response("Token valid", user=current.claims)
