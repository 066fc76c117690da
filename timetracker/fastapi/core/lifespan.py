import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from timetracker.fastapi.dependencies.database import SessionLocal, init_db
from timetracker.fastapi.services.auth import seed_admin

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create missing tables
    init_db()

    # Create the initial admin if none exists
    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()

    yield
