"""
Role-based access policy.

Admins manage employees and read every record; employees only ever see
and change their own records.
"""

from dataclasses import dataclass
from typing import Optional

from timetracker.fastapi.core.exceptions import ForbiddenError
from timetracker.fastapi.models.user import UserRole


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, as resolved from the access token."""

    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def require_admin(identity: Identity) -> Identity:
    """Allow only administrators."""
    if not identity.is_admin:
        raise ForbiddenError("Access denied. Admin access required.")
    return identity


def require_employee(identity: Identity) -> Identity:
    """Allow only employees (timers belong to employee accounts)."""
    if identity.role != UserRole.EMPLOYEE:
        raise ForbiddenError("Access denied. Employee access required.")
    return identity


def resolve_user_scope(identity: Identity, requested_user_id: Optional[str] = None) -> Optional[str]:
    """
    Decide whose records a read may see.

    Args:
        identity: The caller
        requested_user_id: User the caller asked for; None or "all" means no preference

    Returns:
        The user id to filter on, or None for every user (admins only)

    Raises:
        ForbiddenError: If an employee asks for someone else's records
    """
    if requested_user_id == "all":
        requested_user_id = None

    if identity.is_admin:
        return requested_user_id

    if requested_user_id is not None and requested_user_id != identity.user_id:
        raise ForbiddenError("Employees can only access their own records")
    return identity.user_id
