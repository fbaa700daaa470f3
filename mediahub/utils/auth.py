"""
Admin password checks for the write API.
Uses bcrypt; the hash lives in ADMIN_PASSWORD_HASH.
"""
import logging

import bcrypt

from mediahub.config import settings

logger = logging.getLogger(__name__)


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Check a password against a bcrypt hash.
    A malformed hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.warning(f"Stored password hash is not a valid bcrypt hash: {str(e)}")
        return False


def verify_admin_password(password: str) -> bool:
    """
    Verify the admin password against the configured hash.

    Raises:
        ValueError: If ADMIN_PASSWORD_HASH is not configured
    """
    if not settings.ADMIN_PASSWORD_HASH:
        raise ValueError("ADMIN_PASSWORD_HASH not configured")

    return verify_password(password, settings.ADMIN_PASSWORD_HASH)
