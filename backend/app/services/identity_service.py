"""
Identity service for registration, login and password change.
"""
import logging
from datetime import timedelta
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional, Tuple
from app.core.config import Settings
from app.core.exceptions import InvalidCredentials, UsernameTaken, ValidationError
from app.core.security import create_access_token, get_password_hash, verify_password
from app.models.user import User

logger = logging.getLogger(__name__)


class IdentityService:
    """Issues and checks user credentials against the users table."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def _check_password_length(self, password: str, label: str = "Password") -> None:
        minimum = self.settings.MIN_PASSWORD_LENGTH
        if len(password) < minimum:
            raise ValidationError(f"{label} must be at least {minimum} characters")

    def find_user(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def register(self, username: str, password: str) -> User:
        """Register a new user."""
        if not username or not password:
            raise ValidationError("Username and password are required")
        self._check_password_length(password)

        if self.find_user(username) is not None:
            raise UsernameTaken(username)

        new_user = User(username=username, password_hash=get_password_hash(password))
        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            # Same username registered between the check and the insert
            self.db.rollback()
            raise UsernameTaken(username)
        self.db.refresh(new_user)

        logger.info(f"Registered user {username} (id={new_user.id})")
        return new_user

    def authenticate(self, username: str, password: str) -> Tuple[str, User]:
        """
        Check a username/password pair and issue a session token.

        Returns the signed token together with the user it was issued for.
        """
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = self.find_user(username)
        if not user:
            logger.info(f"Login failed for {username}: unknown username")
            raise InvalidCredentials("Username not found")

        if not verify_password(password, user.password_hash):
            logger.info(f"Login failed for {username}: wrong password")
            raise InvalidCredentials("Incorrect password")

        logger.info(f"User {username} logged in")
        return self.issue_token(user), user

    def issue_token(self, user: User) -> str:
        """Sign a session token embedding the user's id and username."""
        return create_access_token(
            {"userId": user.id, "username": user.username},
            self.settings.SECRET_KEY,
            self.settings.ALGORITHM,
            timedelta(hours=self.settings.ACCESS_TOKEN_EXPIRE_HOURS)
        )

    def change_password(self, user_id: int, old_password: str, new_password: str) -> None:
        """
        Replace a user's password after re-checking the old one.

        Tokens issued before the change stay valid until they expire; there
        is no revocation list, the client is told to log in again.
        """
        if not old_password or not new_password:
            raise ValidationError("Old password and new password are required")
        self._check_password_length(new_password, "New password")

        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise InvalidCredentials("User not found")

        if not verify_password(old_password, user.password_hash):
            raise InvalidCredentials("Old password is incorrect")

        user.password_hash = get_password_hash(new_password)
        self.db.commit()
        logger.info(f"Password changed for user {user.username} (id={user.id})")
