"""
JWT authentication utilities.

This module is the token collaborator: it issues signed access tokens
for authenticated accounts and turns a presented token back into the
caller's identity.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from jose import JWTError, jwt

from timetracker.fastapi.core.exceptions import UnauthenticatedError
from timetracker.fastapi.core.init_settings import global_settings
from timetracker.fastapi.models.user import UserRole
from timetracker.fastapi.services.access import Identity


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Dictionary containing token payload data (sub, role, etc.)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token as string
    """
    to_encode = data.copy()

    issued_at = datetime.now(timezone.utc)
    if expires_delta:
        expire = issued_at + expires_delta
    else:
        expire = issued_at + timedelta(minutes=global_settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    # Add expiration and issued at timestamps
    to_encode.update({
        "exp": expire,
        "iat": issued_at
    })

    return jwt.encode(
        to_encode,
        global_settings.JWT_SECRET_KEY,
        algorithm=global_settings.JWT_ALGORITHM
    )


def create_user_token(user_id: str, email: str, role: UserRole,
                      expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT token for an admin or employee.

    Example:
        >>> token = create_user_token("emp_1", "jane@example.com", UserRole.EMPLOYEE)
        >>> verify_token(token).role == UserRole.EMPLOYEE
        True
    """
    token_data = {
        "sub": user_id,
        "email": email,
        "role": UserRole(role).value
    }

    return create_access_token(token_data, expires_delta)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify a token's signature and expiry and return its payload.

    Raises:
        UnauthenticatedError: If the token is invalid, expired or malformed
    """
    try:
        return jwt.decode(
            token,
            global_settings.JWT_SECRET_KEY,
            algorithms=[global_settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        raise UnauthenticatedError("Could not validate credentials") from e


def verify_token(token: Optional[str]) -> Identity:
    """
    Resolve a bearer token to the caller's identity.

    Raises:
        UnauthenticatedError: If the token is missing, invalid, or lacks
            a subject or a known role
    """
    if not token:
        raise UnauthenticatedError("Not authenticated")

    payload = decode_token(token)

    user_id = payload.get("sub")
    role = payload.get("role")
    if user_id is None or role not in {r.value for r in UserRole}:
        raise UnauthenticatedError("Could not validate credentials")

    return Identity(user_id=user_id, role=UserRole(role))
