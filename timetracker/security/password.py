"""
Password hashing and verification utilities using bcrypt.

This module is the credential verification collaborator: accounts only
ever store a salted hash, and login compares against it here.
"""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# bcrypt for new hashes; PBKDF2 hashes are still accepted when verifying
pwd_context = CryptContext(schemes=["bcrypt", "pbkdf2_sha256"], deprecated="auto")

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _truncate(password: str) -> str:
    """Trim a password to bcrypt's byte limit without splitting a character."""
    encoded = password.encode("utf-8")
    if len(encoded) <= BCRYPT_MAX_BYTES:
        return password
    return encoded[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")


def hash_password(password: str) -> str:
    """
    Hash a plaintext password.

    Args:
        password: The plaintext password to hash

    Returns:
        The salted hash as a string

    Example:
        >>> hashed = hash_password("mysecretpassword")
        >>> hashed != "mysecretpassword"
        True
    """
    return pwd_context.hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plaintext password against a stored hash.

    Args:
        plain_password: The plaintext password to verify
        hashed_password: The stored hash to verify against

    Returns:
        True if the password matches, False otherwise (including when the
        stored value is not a recognised hash)

    Example:
        >>> hashed = hash_password("mysecretpassword")
        >>> verify_password("mysecretpassword", hashed)
        True
        >>> verify_password("wrongpassword", hashed)
        False
    """
    try:
        return pwd_context.verify(_truncate(plain_password), hashed_password)
    except ValueError:
        logger.warning("Stored password hash is not in a recognised format")
        return False
