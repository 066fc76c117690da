"""
Create the initial admin user.

This script creates the first admin account directly in the database, the
same way the server does on startup, so the deployment can be checked
before the API is started. Running it again is harmless.

Usage: python create_admin.py [email] [password]
"""

import sys

from timetracker.fastapi.core.init_settings import global_settings
from timetracker.fastapi.dependencies.database import SessionLocal, init_db
from timetracker.fastapi.services.auth import seed_admin


def create_initial_admin(email: str, password: str) -> bool:
    """Create the initial admin user if no admin exists yet."""
    init_db()
    db = SessionLocal()
    try:
        return seed_admin(db, email=email, password=password)
    finally:
        db.close()


if __name__ == "__main__":
    email = sys.argv[1] if len(sys.argv) > 1 else global_settings.INITIAL_ADMIN_EMAIL
    password = sys.argv[2] if len(sys.argv) > 2 else global_settings.INITIAL_ADMIN_PASSWORD

    print("Creating initial admin user...")
    if create_initial_admin(email, password):
        print(f"✅ Created admin {email}. Log in at POST /api/v1/admin/login")
    else:
        print("ℹ️ An admin account already exists, nothing to do.")
