"""
Employee management for administrators.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from timetracker.fastapi.core.exceptions import NotFoundError
from timetracker.fastapi.crud.user import UserCRUD
from timetracker.fastapi.models.user import User, UserRole
from timetracker.fastapi.schemas.user import EmployeeCreate
from timetracker.fastapi.services.access import Identity, require_admin
from timetracker.fastapi.services.timer import user_locks

logger = logging.getLogger(__name__)


def list_employees(db: Session, identity: Identity) -> List[User]:
    """All employee accounts (admins only)."""
    require_admin(identity)
    return UserCRUD(db).list_users(UserRole.EMPLOYEE)


def add_employee(db: Session, identity: Identity, employee_data: EmployeeCreate) -> User:
    """
    Create an employee account with the next staff number (admins only).

    Raises:
        ForbiddenError: If the caller is not an admin
        ConflictError: If the email is already registered
    """
    require_admin(identity)
    employee = UserCRUD(db).create_employee(employee_data)
    logger.info("Admin %s added employee %s (%s)", identity.user_id, employee.id, employee.employee_id)
    return employee


def delete_employee(db: Session, identity: Identity, user_id: str) -> None:
    """
    Delete an employee and all of their time records (admins only).

    Raises:
        ForbiddenError: If the caller is not an admin
        NotFoundError: If no employee has this id
    """
    require_admin(identity)
    crud = UserCRUD(db)
    employee = crud.get_user(user_id)
    if employee is None or employee.role != UserRole.EMPLOYEE:
        raise NotFoundError("Employee not found")
    crud.delete_user(user_id)
    user_locks.discard(user_id)
    logger.info("Admin %s deleted employee %s", identity.user_id, user_id)
