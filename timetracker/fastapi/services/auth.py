"""
Login and admin seeding.
"""

import logging
from typing import Callable

from sqlalchemy.orm import Session

from timetracker.fastapi.core.exceptions import UnauthenticatedError
from timetracker.fastapi.core.init_settings import global_settings
from timetracker.fastapi.crud.user import UserCRUD
from timetracker.fastapi.models.user import User, UserRole
from timetracker.fastapi.schemas.user import TokenResponse, UserRead
from timetracker.security.auth import create_user_token
from timetracker.security.password import verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def authenticate(db: Session, email: str, password: str, role: UserRole,
                 verify: Callable[[str, str], bool] = verify_password) -> User:
    """
    Check login credentials for an account of the given role.

    Unknown emails and wrong passwords fail with the same message.

    Args:
        db: Database session
        email: Login email
        password: Plaintext password
        role: Role the login endpoint is for
        verify: Credential verifier, ``(plain, stored_hash) -> bool``

    Returns:
        The authenticated User

    Raises:
        UnauthenticatedError: If the credentials do not match
    """
    user = UserCRUD(db).get_user_by_email(email, role)
    if user is None or not verify(password, user.password_hash):
        logger.warning("Failed %s login for %s", role.value, email)
        raise UnauthenticatedError(INVALID_CREDENTIALS)

    logger.info("User %s logged in as %s", user.id, role.value)
    return user


def issue_token(user: User) -> TokenResponse:
    """Access token response for an authenticated user."""
    return TokenResponse(
        token=create_user_token(user.id, user.email, user.role),
        token_type="bearer",
        expires_in=global_settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserRead.model_validate(user),
    )


def seed_admin(db: Session, email: str = global_settings.INITIAL_ADMIN_EMAIL,
               password: str = global_settings.INITIAL_ADMIN_PASSWORD) -> bool:
    """
    Create the initial administrator unless an admin already exists.

    Safe to run on every start.

    Returns:
        True if an admin was created, False if one already existed
    """
    crud = UserCRUD(db)
    admin_count = crud.count_users(UserRole.ADMIN)
    if admin_count:
        logger.info("✅ Found %d existing admin(s)", admin_count)
        return False

    admin = crud.create_admin(
        first_name="Admin",
        last_name="User",
        email=email,
        password=password,
    )
    logger.info("🚀 Created initial admin user: %s", admin.email)
    logger.warning("⚠️  Please change the initial admin password after first login!")
    return True
