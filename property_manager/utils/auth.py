"""
Authentication utilities for JWT token management and password hashing.
Provides bcrypt hashing plus issuance and verification of access and reset tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from property_manager.config import settings
from property_manager.utils.exceptions import InvalidTokenError, TokenExpiredError
import hashlib
import uuid


ACCESS_TOKEN = "access"
RESET_TOKEN = "reset"

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


class TokenPayload:
    """JWT token payload structure."""

    def __init__(
        self,
        user_id: str,
        token_type: str,
        exp: Optional[datetime],
        password_fingerprint: Optional[str] = None
    ):
        self.user_id = user_id
        self.token_type = token_type
        self.exp = exp
        self.password_fingerprint = password_fingerprint

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from dictionary."""
        exp = data.get("exp")
        return cls(
            user_id=data["sub"],
            token_type=data.get("type", ACCESS_TOKEN),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
            password_fingerprint=data.get("pwd")
        )


def _default_expiry(token_type: str) -> Optional[timedelta]:
    """Configured lifetime for a token type; None means the token never expires."""
    if token_type == RESET_TOKEN:
        minutes = settings.reset_token_expire_minutes
    else:
        minutes = settings.access_token_expire_minutes
    return timedelta(minutes=minutes) if minutes > 0 else None


def create_token(
    user_id: uuid.UUID,
    token_type: str = ACCESS_TOKEN,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None
) -> str:
    """
    Create a signed JWT for a user.

    Args:
        user_id: User's UUID, stored as the ``sub`` claim
        token_type: ``access`` for signin tokens, ``reset`` for password reset links
        expires_delta: Optional custom lifetime, defaults to the configured one
        extra_claims: Additional claims merged into the payload

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    to_encode: Dict[str, Any] = {
        "sub": str(user_id),
        "type": token_type,
        "iat": now,
    }
    if extra_claims:
        to_encode.update(extra_claims)

    lifetime = expires_delta or _default_expiry(token_type)
    if lifetime:
        to_encode["exp"] = now + lifetime

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def create_access_token(user_id: uuid.UUID, expires_delta: Optional[timedelta] = None) -> str:
    """Create the token handed out on signin."""
    return create_token(user_id, ACCESS_TOKEN, expires_delta)


def password_fingerprint(hashed_password: str) -> str:
    """Short digest of a stored password hash, embedded in reset tokens."""
    return hashlib.sha256(hashed_password.encode("utf-8")).hexdigest()[:16]


def create_reset_token(
    user_id: uuid.UUID,
    hashed_password: Optional[str] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create the time-limited token embedded in password reset links.

    The token is bound to the password hash current at issue time, so it stops
    working once the password has been changed.
    """
    claims = {"pwd": password_fingerprint(hashed_password)} if hashed_password else None
    return create_token(user_id, RESET_TOKEN, expires_delta, claims)


def verify_token(token: str, token_type: str = ACCESS_TOKEN) -> TokenPayload:
    """
    Verify and decode JWT token.

    Args:
        token: JWT token string
        token_type: Expected token type

    Returns:
        Decoded TokenPayload

    Raises:
        TokenExpiredError: If the token has expired
        InvalidTokenError: If the signature, type or payload is invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError as e:
        raise InvalidTokenError(f"Invalid token: {e}")

    if payload.get("type") != token_type:
        raise InvalidTokenError(f"Invalid token type. Expected {token_type}")

    if not payload.get("sub"):
        raise InvalidTokenError("Invalid token payload")

    return TokenPayload.from_dict(payload)


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify password against hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password from database

    Returns:
        True if password matches, False otherwise (including unreadable hashes)
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False

