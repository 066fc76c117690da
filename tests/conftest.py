"""Shared fixtures: in-memory store, account factories and a fixed clock."""

import os

os.environ.setdefault("ENV_MODE", "dev")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta
from itertools import count

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timetracker.fastapi.crud.user import UserCRUD
from timetracker.fastapi.dependencies.database import build_engine, init_db
from timetracker.fastapi.models.time_record import TimeRecord
from timetracker.fastapi.schemas.user import EmployeeCreate

# Friday 15 March 2024, 17:00 server-local
FRIDAY = datetime(2024, 3, 15, 17, 0, 0)
MONDAY = FRIDAY - timedelta(days=4)
WEDNESDAY = FRIDAY - timedelta(days=2)

PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """SQLite file store with a real connection pool, for multi-threaded tests."""
    engine = build_engine(f"sqlite:///{tmp_path / 'timetracker.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def make_employee(db):
    """Factory creating employee accounts with unique emails."""
    sequence = count(1)

    def _make(first_name="Jane", last_name="Doe", email=None, **kwargs):
        email = email or f"employee{next(sequence)}@example.com"
        data = EmployeeCreate(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=kwargs.pop("password", PASSWORD),
            **kwargs,
        )
        return UserCRUD(db).create_employee(data)

    return _make


@pytest.fixture
def employee(make_employee):
    return make_employee()


@pytest.fixture
def admin(db):
    return UserCRUD(db).create_admin(
        first_name="Admin",
        last_name="User",
        email="admin@example.com",
        password=PASSWORD,
    )


def closed_record(user_id, start, seconds, project="Alpha", task="Work", record_id=None):
    """Unsaved stopped record for aggregation tests."""
    return TimeRecord(
        id=record_id or f"rec_{user_id}_{start.isoformat()}",
        user_id=user_id,
        user_name="Test User",
        user_email="test@example.com",
        project=project,
        task=task,
        start_time=start,
        end_time=start + timedelta(seconds=seconds),
        duration_seconds=seconds,
        is_running=False,
        is_paused=False,
        is_manual=True,
        date=start.date().isoformat(),
    )


def running_record(user_id, start, paused=False, task="Work", record_id=None):
    """Unsaved running record for aggregation tests."""
    return TimeRecord(
        id=record_id or f"run_{user_id}_{start.isoformat()}",
        user_id=user_id,
        user_name="Test User",
        user_email="test@example.com",
        project="Alpha",
        task=task,
        start_time=start,
        is_running=True,
        is_paused=paused,
        is_manual=False,
        date=start.date().isoformat(),
    )
