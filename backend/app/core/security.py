"""
Security utilities for JWT authentication and password hashing.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
import hashlib
import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from app.core.exceptions import Unauthenticated
from app.schemas.user import TokenIdentity


def _pre_hash_password(password: str) -> bytes:
    """
    Pre-hash password with SHA256 to support passwords longer than 72 bytes.
    Returns bytes (32 bytes) which is well under bcrypt's 72-byte limit.
    """
    return hashlib.sha256(password.encode('utf-8')).digest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    pre_hashed = _pre_hash_password(plain_password)
    # hashed_password is a string starting with $2b$, convert to bytes for bcrypt
    return bcrypt.checkpw(pre_hashed, hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """
    Hash a password.
    Pre-hashes with SHA256 first to support passwords longer than 72 bytes.
    """
    pre_hashed = _pre_hash_password(password)
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pre_hashed, salt)
    # Return as string for database storage
    return hashed.decode('utf-8')


def create_access_token(
    data: dict,
    secret_key: str,
    algorithm: str,
    expires_delta: timedelta,
    now: Optional[datetime] = None
) -> str:
    """Create a JWT access token valid for ``expires_delta`` from ``now``."""
    to_encode = data.copy()
    issued_at = now or datetime.utcnow()
    to_encode.update({"iat": issued_at, "exp": issued_at + expires_delta})
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


class SessionVerifier:
    """
    Stateless check of the bearer credential presented on each request.

    Holds only the signing secret; the embedded claim is trusted for the
    token's whole validity window.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def verify(self, authorization: Optional[str]) -> TokenIdentity:
        """Verify an ``Authorization`` header value and return the identity it carries."""
        if not authorization:
            raise Unauthenticated(Unauthenticated.MISSING)

        scheme, _, token = authorization.partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            raise Unauthenticated(Unauthenticated.MALFORMED)

        claims = self.decode(token)
        user_id = claims.get("userId")
        username = claims.get("username")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(username, str):
            raise Unauthenticated(Unauthenticated.MALFORMED)

        return TokenIdentity(user_id=user_id, username=username, claims=claims)

    def decode(self, token: str) -> Dict[str, Any]:
        """Decode a raw token, raising Unauthenticated with the failure reason."""
        try:
            jwt.get_unverified_claims(token)
        except JWTError:
            raise Unauthenticated(Unauthenticated.MALFORMED)

        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise Unauthenticated(Unauthenticated.EXPIRED)
        except JWTClaimsError:
            raise Unauthenticated(Unauthenticated.MALFORMED)
        except JWTError:
            # Structure already parsed, so what failed is the signature
            raise Unauthenticated(Unauthenticated.INVALID_SIGNATURE)
