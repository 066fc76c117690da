"""
Employee endpoints for timers, manual entries and personal statistics.

Every route here acts on the authenticated employee's own records.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from timetracker.fastapi.dependencies.database import get_sync_db
from timetracker.fastapi.models.user import User, UserRole
from timetracker.fastapi.schemas.dashboard import EmployeeDashboardStats
from timetracker.fastapi.schemas.time_record import (
    DateRange, ManualEntryCreate, PauseAction, TimeRecordRead, TimerStart
)
from timetracker.fastapi.schemas.user import LoginRequest, TokenResponse, UserRead
from timetracker.fastapi.services import stats, timer
from timetracker.fastapi.services.access import Identity
from timetracker.fastapi.services.auth import authenticate, issue_token
from timetracker.security.dependencies import RequireEmployee


router = APIRouter(tags=["employee"])


def _identity(user: User) -> Identity:
    return Identity(user_id=user.id, role=user.role)


@router.post("/login", response_model=TokenResponse, summary="Employee Login")
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_sync_db)
):
    """
    Authenticate an employee and return a JWT access token.

    **Errors:**
    - **401**: Invalid email or password
    """
    employee = authenticate(db, login_data.email, login_data.password, UserRole.EMPLOYEE)
    return issue_token(employee)


@router.get("/me", response_model=UserRead, summary="Get Current Employee")
async def get_me(current_user: User = RequireEmployee):
    """Current authenticated employee account."""
    return UserRead.model_validate(current_user)


@router.get("/records", response_model=List[TimeRecordRead], summary="List My Records")
async def list_my_records(
    date_range: Optional[DateRange] = Query(None, alias="dateRange", description="today, week, month or all"),
    project: Optional[str] = Query(None, description="Project name or 'all'"),
    db: Session = Depends(get_sync_db),
    current_user: User = RequireEmployee
):
    """
    Get the caller's closed time records, newest first.

    Running timers are never listed.
    """
    records = stats.list_records(db, _identity(current_user), date_range=date_range, project=project)
    return [TimeRecordRead.model_validate(record) for record in records]


@router.post("/timer/start", response_model=TimeRecordRead, status_code=status.HTTP_201_CREATED,
             summary="Start Timer")
async def start_timer(
    timer_data: TimerStart,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireEmployee
):
    """
    Start a timer on a project and task.

    **Errors:**
    - **400**: Project or task missing
    - **409**: A timer is already running or paused
    """
    record = timer.start_timer(db, current_user, timer_data.project, timer_data.task)
    return TimeRecordRead.model_validate(record)


@router.post("/timer/stop/{record_id}", response_model=TimeRecordRead, summary="Stop Timer")
async def stop_timer(
    record_id: str,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireEmployee
):
    """
    Stop a timer and record its duration.

    Stopping a timer that is already stopped returns it unchanged.

    **Errors:**
    - **404**: Timer not found
    """
    record = timer.stop_timer(db, record_id, current_user.id)
    return TimeRecordRead.model_validate(record)


@router.post("/timer/pause/{record_id}", response_model=TimeRecordRead, summary="Pause or Resume Timer")
async def pause_timer(
    record_id: str,
    pause_data: PauseAction,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireEmployee
):
    """
    Pause or resume a running timer with ``{"action": "pause" | "resume"}``.

    Repeating the same action is a no-op.

    **Errors:**
    - **404**: Timer not found
    """
    record = timer.set_timer_pause(db, record_id, current_user.id, pause_data.action)
    return TimeRecordRead.model_validate(record)


@router.get("/timer/active", response_model=Optional[TimeRecordRead], summary="Get Active Timer")
async def get_active_timer(
    db: Session = Depends(get_sync_db),
    current_user: User = RequireEmployee
):
    """The caller's running or paused timer, or null."""
    record = timer.get_active_timer(db, current_user.id)
    return TimeRecordRead.model_validate(record) if record else None


@router.post("/records/manual", response_model=TimeRecordRead, status_code=status.HTTP_201_CREATED,
             summary="Add Manual Entry")
async def add_manual_entry(
    entry_data: ManualEntryCreate,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireEmployee
):
    """
    Add a closed work session with explicit start and end times.

    **Errors:**
    - **400**: Project or task missing, or end time before start time
    """
    record = timer.add_manual_entry(
        db, current_user,
        entry_data.project, entry_data.task,
        entry_data.start_time, entry_data.end_time,
    )
    return TimeRecordRead.model_validate(record)


@router.get("/dashboard/stats", response_model=EmployeeDashboardStats, summary="Employee Dashboard Stats")
async def dashboard_stats(
    db: Session = Depends(get_sync_db),
    current_user: User = RequireEmployee
):
    """
    Personal statistics for today and the current week, with the current
    timer status and a productivity score against a 40 hour week.
    """
    return stats.employee_dashboard(db, _identity(current_user))
