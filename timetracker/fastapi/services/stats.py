"""
Dashboard statistics and record listings.

The ``build_*`` functions are pure reductions over a sequence of records;
``admin_dashboard``, ``employee_dashboard`` and ``list_records`` fetch the
records from the store and apply the caller's scope.
"""

import math
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from timetracker.fastapi.core.init_settings import global_settings
from timetracker.fastapi.core.utils import (
    SECONDS_PER_HOUR, hours_from_seconds, start_of_month, start_of_week, to_local_naive
)
from timetracker.fastapi.crud.time_record import TimeRecordCRUD
from timetracker.fastapi.crud.user import UserCRUD
from timetracker.fastapi.models.time_record import TimeRecord
from timetracker.fastapi.models.user import UserRole
from timetracker.fastapi.schemas.dashboard import AdminDashboardStats, EmployeeDashboardStats
from timetracker.fastapi.schemas.time_record import DateRange, RecordQuery
from timetracker.fastapi.services.access import Identity, require_admin, resolve_user_scope

WEEKLY_TARGET_HOURS = 40

STATUS_WORKING = "Working"
STATUS_PAUSED = "Paused"
STATUS_IDLE = "Not Working"
IDLE_DETAIL = "Ready to start tracking"


def _closed(records: Iterable[TimeRecord]) -> List[TimeRecord]:
    return [r for r in records if not r.is_running]


def _total_seconds(records: Iterable[TimeRecord]) -> int:
    return sum(r.duration_seconds or 0 for r in records)


def _split_week(records: Iterable[TimeRecord], today: date) -> Tuple[List[TimeRecord], List[TimeRecord]]:
    """Closed records of this week (Monday onwards) and the subset dated today."""
    week_start = start_of_week(today).isoformat()
    today_key = today.isoformat()
    week = [r for r in _closed(records) if r.date >= week_start]
    return week, [r for r in week if r.date == today_key]


def _average_hours_per_day(week: List[TimeRecord]) -> float:
    days = len({r.date for r in week})
    return round(_total_seconds(week) / SECONDS_PER_HOUR / max(1, days), 1)


def productivity_score(weekly_hours: float) -> int:
    """Weekly hours as a percentage of a 40 hour week, capped at 100, rounded half up."""
    score = min(weekly_hours * 100 / WEEKLY_TARGET_HOURS, 100)
    return int(math.floor(max(score, 0) + 0.5))


def current_status(active_record: Optional[TimeRecord]) -> Tuple[str, str]:
    """Status label and detail line for a user's active record."""
    if active_record is None or not active_record.is_running:
        return STATUS_IDLE, IDLE_DETAIL
    status = STATUS_PAUSED if active_record.is_paused else STATUS_WORKING
    return status, f"On: {active_record.task}"


def build_admin_stats(records: Iterable[TimeRecord], today: date,
                      active_timers: int, total_team_members: int) -> AdminDashboardStats:
    """
    Reduce records of all users into the admin dashboard.

    Args:
        records: Records to consider; running ones never count towards hours
        today: Calendar day treated as "today"
        active_timers: Running or paused timers across all users
        total_team_members: Number of employee accounts
    """
    week, todays = _split_week(records, today)
    return AdminDashboardStats(
        total_hours_today=hours_from_seconds(_total_seconds(todays)),
        weekly_total=hours_from_seconds(_total_seconds(week)),
        active_timers_now=active_timers,
        days_this_week=len({r.date for r in week}),
        total_team_members=total_team_members,
        active_today=len({r.user_id for r in todays}),
        avg_hours_per_day=_average_hours_per_day(week),
    )


def build_employee_stats(records: Iterable[TimeRecord], today: date,
                         active_record: Optional[TimeRecord] = None) -> EmployeeDashboardStats:
    """
    Reduce one user's records into their dashboard.

    Args:
        records: The user's records; running ones never count towards hours
        today: Calendar day treated as "today"
        active_record: The user's running or paused record, if any
    """
    week, todays = _split_week(records, today)
    weekly_seconds = _total_seconds(week)
    status, detail = current_status(active_record)
    return EmployeeDashboardStats(
        today_hours=hours_from_seconds(_total_seconds(todays)),
        today_sessions=len(todays),
        weekly_total=hours_from_seconds(weekly_seconds),
        days_this_week=len({r.date for r in week}),
        avg_hours_per_day=_average_hours_per_day(week),
        current_status=status,
        status_detail=detail,
        productivity_score=productivity_score(weekly_seconds / SECONDS_PER_HOUR),
    )


def _today(now: Optional[datetime]) -> date:
    return to_local_naive(now).date() if now is not None else datetime.now().date()


def admin_dashboard(db: Session, identity: Identity, now: Optional[datetime] = None) -> AdminDashboardStats:
    """Team-wide dashboard (admins only)."""
    require_admin(identity)
    today = _today(now)
    records = TimeRecordCRUD(db)
    week_records = records.query_records(RecordQuery(date_from=start_of_week(today).isoformat()))
    return build_admin_stats(
        week_records,
        today,
        active_timers=records.count_running(),
        total_team_members=UserCRUD(db).count_users(UserRole.EMPLOYEE),
    )


def employee_dashboard(db: Session, identity: Identity, now: Optional[datetime] = None) -> EmployeeDashboardStats:
    """The caller's own dashboard."""
    today = _today(now)
    records = TimeRecordCRUD(db)
    week_records = records.query_records(RecordQuery(
        user_id=identity.user_id,
        date_from=start_of_week(today).isoformat(),
    ))
    return build_employee_stats(week_records, today, records.find_active_record(identity.user_id))


def date_range_query(date_range: Optional[DateRange], today: date) -> RecordQuery:
    """Translate a named date range into store filter bounds."""
    if date_range == DateRange.TODAY:
        return RecordQuery(date_on=today.isoformat())
    if date_range == DateRange.WEEK:
        return RecordQuery(date_from=start_of_week(today).isoformat())
    if date_range == DateRange.MONTH:
        return RecordQuery(date_from=start_of_month(today).isoformat())
    return RecordQuery()


def list_records(db: Session, identity: Identity,
                 date_range: Optional[DateRange] = None,
                 project: Optional[str] = None,
                 employee_id: Optional[str] = None,
                 now: Optional[datetime] = None) -> List[TimeRecord]:
    """
    Closed records visible to the caller, newest first.

    Employees always get their own records only; admins see everyone's,
    optionally narrowed to one user, and are capped at ADMIN_RECORDS_LIMIT.

    Args:
        db: Database session
        identity: The caller
        date_range: today, week, month or all
        project: Exact project name; None or "all" for every project
        employee_id: User id to narrow to; None or "all" for every user
        now: Reference time for the date range (defaults to now)

    Raises:
        ForbiddenError: If an employee asks for another user's records
    """
    query = date_range_query(date_range, _today(now))
    query.user_id = resolve_user_scope(identity, employee_id)
    query.exclude_running = True
    if project and project != "all":
        query.project = project
    if identity.is_admin:
        query.limit = global_settings.ADMIN_RECORDS_LIMIT
    return TimeRecordCRUD(db).query_records(query)
