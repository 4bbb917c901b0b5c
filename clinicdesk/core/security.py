"""
Password hashing and signed session tokens for staff logins.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import jwt, JWTError
from passlib.context import CryptContext
import secrets
import logging

from ..config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Reset passwords are 8 hex characters
RESET_PASSWORD_BYTES = 4


def hash_password(password: str) -> str:
    """Hash a staff password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    """
    Check a plain password against a stored hash.

    A missing or unreadable hash never matches.
    """
    if not password_hash:
        return False
    try:
        return pwd_context.verify(plain_password, password_hash)
    except ValueError:
        logger.warning("Stored password hash is not a recognised bcrypt hash")
        return False


def generate_reset_password() -> str:
    """Random one-time password handed out by a password reset."""
    return secrets.token_hex(RESET_PASSWORD_BYTES)


def create_session_token(claims: Dict[str, Any], lifetime: Optional[timedelta] = None) -> str:
    """
    Sign a session token for a logged in staff member.

    Args:
        claims: Staff identity and permission claims
        lifetime: How long the session stays valid
            (defaults to settings.access_token_expire_minutes)

    Returns:
        str: Encoded JWT
    """
    lifetime = lifetime or timedelta(minutes=settings.access_token_expire_minutes)
    issued_at = datetime.now(timezone.utc)
    payload = {**claims, "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_session_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the claims of a valid session token, or None when it is invalid or expired."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.info(f"Rejected session token: {str(e)}")
        return None
