"""
Time record lifecycle: timers and manual entries.

A user has at most one active (running or paused) record. Timers move
Running <-> Paused -> Stopped; manual entries are created already stopped
and do not take part in the active-timer check.
"""

import logging
import threading
from collections import defaultdict
from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from timetracker.fastapi.core.exceptions import ConflictError, NotFoundError, ValidationError
from timetracker.fastapi.core.utils import calendar_date, elapsed_seconds, format_duration, to_local_naive
from timetracker.fastapi.crud.time_record import TimeRecordCRUD
from timetracker.fastapi.models.time_record import TimeRecord
from timetracker.fastapi.models.user import User

logger = logging.getLogger(__name__)


class UserLocks:
    """Per-user locks serialising changes to a user's active timer."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = defaultdict(threading.Lock)

    def for_user(self, user_id: str) -> threading.Lock:
        with self._guard:
            return self._locks[user_id]

    def discard(self, user_id: str) -> None:
        """Forget a user's lock once the user no longer exists."""
        with self._guard:
            self._locks.pop(user_id, None)

    def __contains__(self, user_id: str) -> bool:
        with self._guard:
            return user_id in self._locks


user_locks = UserLocks()


def _require_text(value: Optional[str], field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} is required")
    return cleaned


def _now(now: Optional[datetime]) -> datetime:
    return to_local_naive(now) if now is not None else datetime.now()


def _get_owned_record(crud: TimeRecordCRUD, record_id: str, user_id: str) -> TimeRecord:
    record = crud.find_record_by_id(record_id, user_id)
    if record is None:
        raise NotFoundError("Timer not found")
    return record


def start_timer(db: Session, user: User, project: str, task: str,
                now: Optional[datetime] = None) -> TimeRecord:
    """
    Start a new timer for a user.

    Args:
        db: Database session
        user: Owner; their name and email are copied onto the record
        project: Project name
        task: Task description
        now: Start time (defaults to the current server-local time)

    Returns:
        The new running TimeRecord

    Raises:
        ValidationError: If project or task is blank
        ConflictError: If the user already has a running or paused timer
    """
    project = _require_text(project, "Project")
    task = _require_text(task, "Task")
    started = _now(now)
    crud = TimeRecordCRUD(db)

    with user_locks.for_user(user.id):
        if crud.find_active_record(user.id) is not None:
            raise ConflictError("Timer already running")

        record = crud.create_record(TimeRecord(
            id=f"timer_{uuid4().hex}",
            user_id=user.id,
            user_name=user.full_name,
            user_email=user.email,
            project=project,
            task=task,
            start_time=started,
            is_running=True,
            is_paused=False,
            is_manual=False,
            date=calendar_date(started),
        ))

    logger.info("Started timer %s for user %s on %s", record.id, user.id, project)
    return record


def pause_timer(db: Session, record_id: str, user_id: str) -> TimeRecord:
    """
    Mark a running timer as paused.

    Pausing an already paused timer changes nothing. A stopped record is
    returned unchanged, since only running records can be paused.

    Raises:
        NotFoundError: If the record does not exist or belongs to another user
    """
    crud = TimeRecordCRUD(db)
    with user_locks.for_user(user_id):
        record = _get_owned_record(crud, record_id, user_id)
        if not record.is_running or record.is_paused:
            return record
        record.is_paused = True
        return crud.update_record(record)


def resume_timer(db: Session, record_id: str, user_id: str) -> TimeRecord:
    """
    Clear the paused flag on a timer.

    Resuming a timer that is not paused changes nothing.

    Raises:
        NotFoundError: If the record does not exist or belongs to another user
    """
    crud = TimeRecordCRUD(db)
    with user_locks.for_user(user_id):
        record = _get_owned_record(crud, record_id, user_id)
        if not record.is_paused:
            return record
        record.is_paused = False
        return crud.update_record(record)


def set_timer_pause(db: Session, record_id: str, user_id: str, action: str) -> TimeRecord:
    """Dispatch a ``{"action": "pause" | "resume"}`` request."""
    if action == "pause":
        return pause_timer(db, record_id, user_id)
    if action == "resume":
        return resume_timer(db, record_id, user_id)
    raise ValidationError(f"Unknown timer action: {action!r}")


def stop_timer(db: Session, record_id: str, user_id: str,
               now: Optional[datetime] = None) -> TimeRecord:
    """
    Stop a timer and record how long it ran.

    The end time, formatted duration, duration in seconds and the cleared
    running/paused flags are written in a single commit. Stopping a record
    that is already stopped returns it unchanged, so its duration is only
    ever computed once.

    Raises:
        NotFoundError: If the record does not exist or belongs to another user
    """
    crud = TimeRecordCRUD(db)
    with user_locks.for_user(user_id):
        record = _get_owned_record(crud, record_id, user_id)
        if not record.is_running:
            logger.info("Timer %s is already stopped", record_id)
            return record

        ended = _now(now)
        seconds = elapsed_seconds(record.start_time, ended)
        if seconds < 0:
            logger.warning(
                "Clock skew stopping timer %s: end %s is before start %s, recording 0s",
                record_id, ended, record.start_time,
            )
            seconds = 0
            ended = record.start_time

        record.end_time = ended
        record.duration_seconds = seconds
        record.duration = format_duration(seconds)
        record.is_running = False
        record.is_paused = False
        record = crud.update_record(record)

    logger.info("Stopped timer %s for user %s after %s", record.id, user_id, record.duration)
    return record


def add_manual_entry(db: Session, user: User, project: str, task: str,
                     start_time: datetime, end_time: datetime) -> TimeRecord:
    """
    Record a closed work session entered after the fact.

    Manual entries may coexist with a running timer.

    Args:
        db: Database session
        user: Owner; their name and email are copied onto the record
        project: Project name
        task: Task description
        start_time: When work started
        end_time: When work ended

    Returns:
        The new stopped TimeRecord

    Raises:
        ValidationError: If project or task is blank or end_time precedes start_time
    """
    project = _require_text(project, "Project")
    task = _require_text(task, "Task")
    started = to_local_naive(start_time)
    ended = to_local_naive(end_time)

    seconds = elapsed_seconds(started, ended)
    if seconds < 0:
        raise ValidationError("End time must not be before start time")

    record = TimeRecordCRUD(db).create_record(TimeRecord(
        id=f"manual_{uuid4().hex}",
        user_id=user.id,
        user_name=user.full_name,
        user_email=user.email,
        project=project,
        task=task,
        start_time=started,
        end_time=ended,
        duration=format_duration(seconds),
        duration_seconds=seconds,
        is_running=False,
        is_paused=False,
        is_manual=True,
        date=calendar_date(started),
    ))

    logger.info("Added manual entry %s for user %s (%s)", record.id, user.id, record.duration)
    return record


def get_active_timer(db: Session, user_id: str) -> Optional[TimeRecord]:
    """The user's running or paused record, if any."""
    return TimeRecordCRUD(db).find_active_record(user_id)
