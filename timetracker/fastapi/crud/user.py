"""
User CRUD operations.

This module provides database operations for accounts including
creation with sequential employee numbers, lookups, counting and
deletion together with the user's time records.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from timetracker.fastapi.core.exceptions import ConflictError
from timetracker.fastapi.crud.time_record import TimeRecordCRUD
from timetracker.fastapi.dependencies.database import store_errors
from timetracker.fastapi.models.counter import Counter
from timetracker.fastapi.models.user import User, UserRole, new_user_id
from timetracker.fastapi.schemas.user import EmployeeCreate
from timetracker.security.password import hash_password

logger = logging.getLogger(__name__)

EMPLOYEE_SEQUENCE = "employee"
MAX_CREATE_ATTEMPTS = 3


def format_employee_number(value: int) -> str:
    """Staff number shown to users, e.g. 7 -> EMP007."""
    return f"EMP{value:03d}"


class UserCRUD:
    """CRUD operations for User model."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def get_user(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User id

        Returns:
            User instance or None if not found
        """
        with store_errors(self.db):
            return self.db.get(User, user_id)

    def get_user_by_email(self, email: str, role: Optional[UserRole] = None) -> Optional[User]:
        """
        Get user by email, optionally restricted to a role.

        Args:
            email: Login email (compared case-insensitively)
            role: Only match accounts with this role (optional)

        Returns:
            User instance or None if not found
        """
        query = self.db.query(User).filter(func.lower(User.email) == email.strip().lower())
        if role is not None:
            query = query.filter(User.role == role)
        with store_errors(self.db):
            return query.first()

    def list_users(self, role: Optional[UserRole] = None) -> List[User]:
        """
        Get accounts ordered by creation time.

        Args:
            role: Filter by role (optional)
        """
        query = self.db.query(User)
        if role is not None:
            query = query.filter(User.role == role)
        with store_errors(self.db):
            return query.order_by(User.created_at, User.employee_id).all()

    def count_users(self, role: Optional[UserRole] = None) -> int:
        """
        Count accounts.

        Args:
            role: Filter by role (optional)
        """
        query = self.db.query(func.count(User.id))
        if role is not None:
            query = query.filter(User.role == role)
        with store_errors(self.db):
            return query.scalar() or 0

    def next_sequence_value(self, name: str) -> int:
        """
        Increment a named counter inside the current transaction.

        The increment is a single UPDATE in the store, so concurrent
        transactions serialise on the counter row. A missing counter is
        created starting from the number of existing employees; a
        concurrent creation of the same row surfaces as IntegrityError and
        is retried by the caller.

        Returns:
            The new counter value
        """
        if self.db.get(Counter, name) is None:
            self.db.add(Counter(name=name, value=self.count_users(UserRole.EMPLOYEE)))
            self.db.flush()

        self.db.execute(
            update(Counter)
            .where(Counter.name == name)
            .values(value=Counter.value + 1)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(select(Counter.value).where(Counter.name == name)).scalar_one()

    def create_employee(self, employee_data: EmployeeCreate) -> User:
        """
        Create a new employee with the next staff number.

        Args:
            employee_data: Employee creation data

        Returns:
            Created User instance

        Raises:
            ConflictError: If the email is already registered
        """
        if self.get_user_by_email(employee_data.email):
            raise ConflictError("Email already exists")

        hashed_password = hash_password(employee_data.password)

        with store_errors(self.db):
            for attempt in range(1, MAX_CREATE_ATTEMPTS + 1):
                try:
                    number = self.next_sequence_value(EMPLOYEE_SEQUENCE)
                    db_user = User(
                        id=new_user_id(),
                        first_name=employee_data.first_name,
                        last_name=employee_data.last_name,
                        email=employee_data.email,
                        password_hash=hashed_password,
                        role=UserRole.EMPLOYEE,
                        department=employee_data.department,
                        position=employee_data.position,
                        employee_id=format_employee_number(number),
                    )
                    self.db.add(db_user)
                    self.db.commit()
                except IntegrityError:
                    self.db.rollback()
                    if self.get_user_by_email(employee_data.email):
                        raise ConflictError("Email already exists")
                    logger.warning("Employee number clash on attempt %d, retrying", attempt)
                    continue

                self.db.refresh(db_user)
                return db_user

        raise ConflictError("Could not assign a unique employee number, please retry")

    def create_admin(self, first_name: str, last_name: str, email: str, password: str,
                     user_id: str = "admin_001", employee_id: str = "ADM001",
                     department: str = "Administration",
                     position: str = "System Administrator") -> User:
        """
        Create an administrator account.

        Raises:
            ConflictError: If the email or id is already taken
        """
        db_user = User(
            id=user_id,
            first_name=first_name,
            last_name=last_name,
            email=email.strip().lower(),
            password_hash=hash_password(password),
            role=UserRole.ADMIN,
            department=department,
            position=position,
            employee_id=employee_id,
        )

        with store_errors(self.db):
            self.db.add(db_user)
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise ConflictError("Admin account already exists") from e
            self.db.refresh(db_user)
            return db_user

    def delete_user(self, user_id: str) -> bool:
        """
        Delete a user and every time record they own, in one transaction.

        Args:
            user_id: User id to delete

        Returns:
            True if deleted, False if not found
        """
        db_user = self.get_user(user_id)
        if not db_user:
            return False

        with store_errors(self.db):
            removed = TimeRecordCRUD(self.db).delete_records_by_user(user_id, commit=False)
            self.db.delete(db_user)
            self.db.commit()

        logger.info("Deleted user %s and %d time record(s)", user_id, removed)
        return True


# Convenience functions
def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get user by ID."""
    return UserCRUD(db).get_user(user_id)
