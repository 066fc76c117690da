"""
Pydantic schemas for TimeRecord validation and serialization.

This module defines the timer and manual entry request bodies, the record
response shape and the filter passed to the record store.
"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from timetracker.fastapi.schemas.user import CamelModel


class DateRange(str, Enum):
    """Date range filter for record listings."""
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class TimerStart(CamelModel):
    """Schema for starting a timer."""

    project: str = Field(..., max_length=200, examples=["Website Redesign"])
    task: str = Field(..., max_length=500, examples=["Landing page layout"])


class PauseAction(CamelModel):
    """Schema for pausing or resuming a running timer."""

    action: Literal["pause", "resume"] = Field(..., examples=["pause", "resume"])


class ManualEntryCreate(CamelModel):
    """Schema for adding a closed record after the fact."""

    project: str = Field(..., max_length=200, examples=["Website Redesign"])
    task: str = Field(..., max_length=500, examples=["Client call"])
    start_time: datetime = Field(..., description="When work started")
    end_time: datetime = Field(..., description="When work ended")


class TimeRecordRead(CamelModel):
    """Schema for reading a time record."""

    id: str
    user_id: str
    user_name: str
    user_email: str
    project: str
    task: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[str] = None
    duration_seconds: Optional[int] = None
    is_running: bool
    is_paused: bool
    is_manual: bool
    date: str = Field(..., description="Calendar date bucket (YYYY-MM-DD)")
    recorded_at: datetime


class RecordQuery(BaseModel):
    """
    Filter for querying the record store.

    ``date_on`` matches a single calendar date, ``date_from`` everything on
    or after a date; both compare against the record's date bucket.
    """

    user_id: Optional[str] = None
    date_on: Optional[str] = None
    date_from: Optional[str] = None
    project: Optional[str] = None
    exclude_running: bool = True
    limit: Optional[int] = Field(None, ge=1)
