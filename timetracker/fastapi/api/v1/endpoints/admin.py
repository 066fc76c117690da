"""
Admin authentication and management endpoints.

This module provides FastAPI endpoints for admin login, employee
management, the team-wide record listing and the admin dashboard.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from timetracker.fastapi.crud.user import get_user
from timetracker.fastapi.dependencies.database import get_sync_db
from timetracker.fastapi.models.user import UserRole
from timetracker.fastapi.schemas.dashboard import AdminDashboardStats
from timetracker.fastapi.schemas.time_record import DateRange, TimeRecordRead
from timetracker.fastapi.schemas.user import (
    EmployeeCreate, LoginRequest, MessageResponse, TokenResponse, UserRead
)
from timetracker.fastapi.services import employees, stats
from timetracker.fastapi.services.access import Identity
from timetracker.fastapi.services.auth import authenticate, issue_token
from timetracker.security.dependencies import RequireAdmin


router = APIRouter(tags=["admin"])


@router.post("/login", response_model=TokenResponse, summary="Admin Login")
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_sync_db)
):
    """
    Authenticate an administrator and return a JWT access token.

    **Returns:**
    - **token**: JWT token for authenticated requests
    - **expiresIn**: Token lifetime in seconds
    - **user**: Admin account information (without password)

    **Errors:**
    - **401**: Invalid email or password
    """
    admin = authenticate(db, login_data.email, login_data.password, UserRole.ADMIN)
    return issue_token(admin)


@router.get("/me", response_model=UserRead, summary="Get Current Admin")
async def get_me(
    db: Session = Depends(get_sync_db),
    current_admin: Identity = RequireAdmin
):
    """Current authenticated admin account."""
    return UserRead.model_validate(get_user(db, current_admin.user_id))


@router.get("/employees", response_model=List[UserRead], summary="List Employees")
async def list_employees(
    db: Session = Depends(get_sync_db),
    current_admin: Identity = RequireAdmin
):
    """
    Get every employee account.

    **Permissions:** Requires admin authentication
    """
    return [UserRead.model_validate(user) for user in employees.list_employees(db, current_admin)]


@router.post("/employees", response_model=UserRead, status_code=status.HTTP_201_CREATED,
             summary="Add Employee")
async def add_employee(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_sync_db),
    current_admin: Identity = RequireAdmin
):
    """
    Create an employee account.

    The employee number (EMP001, EMP002, ...) is assigned by the server.

    **Errors:**
    - **403**: Caller is not an admin
    - **409**: Email already exists
    """
    employee = employees.add_employee(db, current_admin, employee_data)
    return UserRead.model_validate(employee)


@router.delete("/employees/{employee_id}", response_model=MessageResponse, summary="Delete Employee")
async def delete_employee(
    employee_id: str,
    db: Session = Depends(get_sync_db),
    current_admin: Identity = RequireAdmin
):
    """
    Delete an employee together with all of their time records.

    **Errors:**
    - **403**: Caller is not an admin
    - **404**: Employee not found
    """
    employees.delete_employee(db, current_admin, employee_id)
    return MessageResponse(message="Employee deleted successfully")


@router.get("/records", response_model=List[TimeRecordRead], summary="List All Records")
async def list_records(
    date_range: Optional[DateRange] = Query(None, alias="dateRange", description="today, week, month or all"),
    employee_id: Optional[str] = Query(None, alias="employeeId", description="User id or 'all'"),
    project: Optional[str] = Query(None, description="Project name or 'all'"),
    db: Session = Depends(get_sync_db),
    current_admin: Identity = RequireAdmin
):
    """
    Get closed time records across all users, newest first.

    Running timers are never listed. At most 100 records are returned.
    """
    records = stats.list_records(
        db, current_admin,
        date_range=date_range,
        project=project,
        employee_id=employee_id,
    )
    return [TimeRecordRead.model_validate(record) for record in records]


@router.get("/dashboard/stats", response_model=AdminDashboardStats, summary="Admin Dashboard Stats")
async def dashboard_stats(
    db: Session = Depends(get_sync_db),
    current_admin: Identity = RequireAdmin
):
    """
    Team-wide statistics for today and the current week (Monday onwards).
    """
    return stats.admin_dashboard(db, current_admin)
