"""
User model for administrators and employees.

This module defines the SQLAlchemy model for every account that can sign
in to the time tracker, distinguished by role.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship

from timetracker.fastapi.dependencies.database import Base


class UserRole(str, Enum):
    """Enum for account roles."""
    ADMIN = "admin"
    EMPLOYEE = "employee"


def new_user_id() -> str:
    return f"emp_{uuid4().hex}"


class User(Base):
    """
    Account model for administrators and employees.

    Attributes:
        id: Stable string identifier
        first_name: Given name
        last_name: Family name
        email: Unique login email
        password_hash: Salted password hash
        role: admin or employee
        department: Department name
        position: Job title
        employee_id: Sequential staff number (EMP001, EMP002, ...)
        created_at: Account creation timestamp

    Relationships:
        time_records: Work sessions owned by this user
    """

    __tablename__ = "users"

    # Primary key
    id = Column(
        String(64),
        primary_key=True,
        default=new_user_id,
        index=True,
        doc="Unique user identifier"
    )

    # Profile
    first_name = Column(String(100), nullable=False, doc="Given name")
    last_name = Column(String(100), nullable=False, doc="Family name")

    # Authentication fields
    email = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique email used for login"
    )

    password_hash = Column(
        String(255),
        nullable=False,
        doc="Salted password hash"
    )

    role = Column(
        SQLEnum(UserRole),
        nullable=False,
        default=UserRole.EMPLOYEE,
        index=True,
        doc="Account role (admin or employee)"
    )

    # Staff information
    department = Column(String(100), nullable=False, default="General")
    position = Column(String(100), nullable=False, default="")

    employee_id = Column(
        String(20),
        unique=True,
        nullable=True,
        doc="Sequential staff number, unique across accounts"
    )

    # Timestamps
    created_at = Column(
        DateTime,
        default=datetime.now,
        nullable=False,
        doc="Account creation timestamp"
    )

    # Relationships
    time_records = relationship("TimeRecord", back_populates="user", passive_deletes=True)

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"

    @property
    def full_name(self) -> str:
        """First and last name joined by a space."""
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
