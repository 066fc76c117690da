"""
Pydantic schemas for User validation and serialization.

This module defines the request and response schemas for login and
employee management. Field names are exposed in camelCase on the wire.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from timetracker.fastapi.models.user import UserRole


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CamelModel(BaseModel):
    """Base schema that reads snake_case attributes and speaks camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class EmployeeCreate(CamelModel):
    """Schema for creating a new employee account."""

    first_name: str = Field(..., min_length=1, max_length=100, examples=["Jane"])
    last_name: str = Field(..., min_length=1, max_length=100, examples=["Doe"])
    email: str = Field(
        ...,
        max_length=255,
        pattern=EMAIL_PATTERN,
        description="Unique login email",
        examples=["jane.doe@example.com"]
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=100,
        description="Initial password (minimum 6 characters)",
        examples=["ChangeMe123"]
    )
    department: str = Field(default="General", max_length=100, examples=["Engineering"])
    position: str = Field(default="", max_length=100, examples=["Developer"])

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are matched case-insensitively."""
        return v.strip().lower()

    @field_validator("department", mode="before")
    @classmethod
    def default_department(cls, v):
        """Convert missing or blank department to the default."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return "General"
        return v


class UserRead(CamelModel):
    """Schema for reading account information (never includes the password)."""

    id: str = Field(..., description="User identifier")
    first_name: str
    last_name: str
    email: str
    role: UserRole
    department: str
    position: str
    employee_id: Optional[str] = Field(None, description="Sequential staff number")
    created_at: datetime


class LoginRequest(CamelModel):
    """Schema for admin and employee login requests."""

    email: str = Field(..., examples=["admin@timetracker.local"])
    password: str = Field(..., examples=["admin123456"])

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class TokenResponse(CamelModel):
    """Login response with the JWT access token and the account."""

    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    user: UserRead = Field(..., description="Authenticated account")


class MessageResponse(CamelModel):
    """Plain confirmation message."""

    message: str
