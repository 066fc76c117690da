"""
TimeRecord model for timers and manual work entries.

This module defines the SQLAlchemy model for a single work session. A
record is created running (timer) or already closed (manual entry) and is
only ever mutated by pause/resume and stop.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import Column, String, DateTime, Integer, Boolean, ForeignKey, Index, true
from sqlalchemy.orm import relationship

from timetracker.fastapi.dependencies.database import Base


class RecordState(str, Enum):
    """Lifecycle states of a time record."""
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


class TimeRecord(Base):
    """
    Work session owned by a single user.

    The owner's name and email are copied onto the record when it is
    created and are not refreshed afterwards.

    Attributes:
        id: Record identifier (timer_... or manual_...)
        user_id: Owning user
        user_name: Owner's full name at creation time
        user_email: Owner's email at creation time
        project: Project name
        task: Task description
        start_time: When work started (server-local)
        end_time: When work stopped, set once on stop
        duration: Formatted duration, set once on stop
        duration_seconds: Whole seconds worked, set once on stop
        is_running: True until the record is stopped
        is_paused: Only ever true while running
        is_manual: Entered after the fact rather than timed
        date: Calendar date of start_time (YYYY-MM-DD), the aggregation bucket
        recorded_at: Row creation timestamp
    """

    __tablename__ = "time_records"

    # Primary key
    id = Column(String(64), primary_key=True, index=True, doc="Unique record identifier")

    # Owner, with a snapshot of the name and email
    user_id = Column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Reference to the owning user"
    )
    user_name = Column(String(201), nullable=False)
    user_email = Column(String(255), nullable=False)

    # Work details
    project = Column(String(200), nullable=False, index=True)
    task = Column(String(500), nullable=False)

    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)
    duration = Column(String(20), nullable=True)
    duration_seconds = Column(Integer, nullable=True)

    # State flags
    is_running = Column(Boolean, nullable=False, default=False)
    is_paused = Column(Boolean, nullable=False, default=False)
    is_manual = Column(Boolean, nullable=False, default=False)

    date = Column(String(10), nullable=False, index=True, doc="Calendar date bucket (YYYY-MM-DD)")

    recorded_at = Column(DateTime, default=datetime.now, nullable=False)

    # Relationship
    user = relationship("User", back_populates="time_records")

    def __repr__(self) -> str:
        """String representation of TimeRecord."""
        return f"<TimeRecord(id={self.id}, user_id={self.user_id}, state={self.state.value}, date={self.date})>"

    @property
    def state(self) -> RecordState:
        if not self.is_running:
            return RecordState.STOPPED
        return RecordState.PAUSED if self.is_paused else RecordState.RUNNING


# At most one running record per user, enforced by the store
Index(
    "uq_time_records_active_user",
    TimeRecord.user_id,
    unique=True,
    sqlite_where=TimeRecord.is_running == true(),
    postgresql_where=TimeRecord.is_running == true(),
)
