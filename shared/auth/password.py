"""
Password Hashing
================

Reviewer credential checks using bcrypt.

Version: 0.1.0
"""

import secrets

from passlib.context import CryptContext

from shared.config import settings
from shared.logging import get_logger


logger = get_logger(__name__)

_pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=12,
)


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        str: Bcrypt hash of the password
    """
    return _pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Bcrypt hash to verify against

    Returns:
        bool: True if password matches hash
    """
    return _pwd_context.verify(plain_password, hashed_password)


def authenticate_reviewer(username: str, password: str) -> bool:
    """
    Check reviewer credentials against the configured admin account.

    A configured bcrypt hash is preferred; the plain password setting is
    the development fallback.
    """
    admin = settings.admin
    if not secrets.compare_digest(username.encode(), admin.username.encode()):
        logger.warning("reviewer_login_unknown_user", username=username)
        return False

    password_hash = admin.password_hash.get_secret_value()
    if password_hash:
        ok = verify_password(password, password_hash)
    else:
        ok = secrets.compare_digest(password.encode(), admin.password.get_secret_value().encode())

    if not ok:
        logger.warning("reviewer_login_bad_password", username=username)
    return ok
