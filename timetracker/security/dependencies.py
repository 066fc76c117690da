"""
Authentication dependencies for FastAPI.

This module provides dependency functions for protecting routes and
resolving the authenticated caller. Failures raise the domain
exceptions, which the application's exception handlers turn into 401 or
403 responses.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from timetracker.fastapi.core.exceptions import UnauthenticatedError
from timetracker.fastapi.crud.user import get_user
from timetracker.fastapi.dependencies.database import get_sync_db
from timetracker.fastapi.models.user import User
from timetracker.fastapi.services.access import Identity, require_admin, require_employee
from timetracker.security.auth import verify_token


# HTTP Bearer token scheme; missing headers are reported by verify_token
security = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """
    Extract and validate the JWT token from the Authorization header.

    Raises:
        UnauthenticatedError: If the token is missing or invalid

    Usage:
        @app.get("/protected")
        async def protected_route(identity: Identity = Depends(get_current_identity)):
            return {"user_id": identity.user_id}
    """
    return verify_token(credentials.credentials if credentials else None)


async def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_sync_db)
) -> User:
    """
    Load the account behind the token.

    Raises:
        UnauthenticatedError: If the account no longer exists or its role changed
    """
    user = get_user(db, identity.user_id)
    if user is None or user.role != identity.role:
        raise UnauthenticatedError("Could not validate credentials")
    return user


async def get_current_admin(
    identity: Identity = Depends(get_current_identity),
    user: User = Depends(get_current_user),
) -> Identity:
    """
    Authenticated administrator.

    Raises:
        ForbiddenError: If the caller is not an admin
    """
    return require_admin(identity)


async def get_current_employee(
    identity: Identity = Depends(get_current_identity),
    user: User = Depends(get_current_user),
) -> User:
    """
    Authenticated employee account.

    Raises:
        ForbiddenError: If the caller is not an employee
    """
    require_employee(identity)
    return user


# Convenience dependencies for different permission levels
RequireAuth = Depends(get_current_identity)
RequireAdmin = Depends(get_current_admin)
RequireEmployee = Depends(get_current_employee)
