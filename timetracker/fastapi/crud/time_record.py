"""
TimeRecord CRUD operations.

This module is the record store for time records: lookups of the active
timer, inserts, single-write updates and filtered queries used by the
listings and the dashboards.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, desc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from timetracker.fastapi.core.exceptions import ConflictError, DuplicateIdError
from timetracker.fastapi.dependencies.database import store_errors
from timetracker.fastapi.models.time_record import TimeRecord
from timetracker.fastapi.schemas.time_record import RecordQuery

logger = logging.getLogger(__name__)


class TimeRecordCRUD:
    """CRUD operations for TimeRecord model."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def find_active_record(self, user_id: str) -> Optional[TimeRecord]:
        """
        Get the user's running or paused record.

        Args:
            user_id: Owning user id

        Returns:
            TimeRecord instance or None if the user has no active timer
        """
        with store_errors(self.db):
            return (self.db.query(TimeRecord)
                    .filter(TimeRecord.user_id == user_id, TimeRecord.is_running.is_(True))
                    .first())

    def create_record(self, record: TimeRecord) -> TimeRecord:
        """
        Insert a new time record.

        Args:
            record: Unsaved TimeRecord with its id already assigned

        Returns:
            The saved TimeRecord

        Raises:
            DuplicateIdError: If a record with the same id exists
            ConflictError: If the insert would give the user a second running record
        """
        with store_errors(self.db):
            if self.db.get(TimeRecord, record.id) is not None:
                raise DuplicateIdError(f"Time record {record.id} already exists")

            self.db.add(record)
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                if record.is_running and self.find_active_record(record.user_id) is not None:
                    raise ConflictError("Timer already running") from e
                raise DuplicateIdError(f"Time record {record.id} already exists") from e

            self.db.refresh(record)
            return record

    def find_record_by_id(self, record_id: str, user_id: str) -> Optional[TimeRecord]:
        """
        Get a record by id, only if it belongs to the given user.

        Args:
            record_id: TimeRecord id
            user_id: Expected owner

        Returns:
            TimeRecord instance or None if not found or owned by someone else
        """
        with store_errors(self.db):
            return (self.db.query(TimeRecord)
                    .filter(TimeRecord.id == record_id, TimeRecord.user_id == user_id)
                    .first())

    def update_record(self, record: TimeRecord) -> TimeRecord:
        """
        Persist every pending change on a record in a single commit.

        On failure the session is rolled back and the record keeps the
        state it had in the store.
        """
        with store_errors(self.db):
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise ConflictError("Time record update conflicts with the current state") from e
            self.db.refresh(record)
            return record

    def query_records(self, query: RecordQuery) -> List[TimeRecord]:
        """
        Get records matching a filter, newest first.

        Args:
            query: User, date bucket, project and running filters

        Returns:
            List of TimeRecord instances ordered by start time descending
        """
        q = self.db.query(TimeRecord)

        if query.exclude_running:
            q = q.filter(TimeRecord.is_running.is_(False))

        if query.user_id:
            q = q.filter(TimeRecord.user_id == query.user_id)

        if query.date_on:
            q = q.filter(TimeRecord.date == query.date_on)

        if query.date_from:
            q = q.filter(TimeRecord.date >= query.date_from)

        if query.project:
            q = q.filter(TimeRecord.project == query.project)

        q = q.order_by(desc(TimeRecord.start_time), desc(TimeRecord.recorded_at))

        if query.limit:
            q = q.limit(query.limit)

        with store_errors(self.db):
            return q.all()

    def count_running(self, user_id: Optional[str] = None) -> int:
        """
        Count running (including paused) records.

        Args:
            user_id: Restrict the count to one user (optional)
        """
        q = self.db.query(func.count(TimeRecord.id)).filter(TimeRecord.is_running.is_(True))
        if user_id:
            q = q.filter(TimeRecord.user_id == user_id)
        with store_errors(self.db):
            return q.scalar() or 0

    def delete_records_by_user(self, user_id: str, commit: bool = True) -> int:
        """
        Delete every record owned by a user.

        Args:
            user_id: Owning user id
            commit: Commit immediately; pass False to join a larger transaction

        Returns:
            Number of records deleted
        """
        with store_errors(self.db):
            result = self.db.execute(
                delete(TimeRecord)
                .where(TimeRecord.user_id == user_id)
                .execution_options(synchronize_session=False)
            )
            if commit:
                self.db.commit()
            return result.rowcount or 0
