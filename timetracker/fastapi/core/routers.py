from fastapi import FastAPI
from timetracker.fastapi.api.v1.endpoints import base, admin, employee

def setup_routers(app: FastAPI):
    # Main routes
    app.include_router(base.router, prefix="", tags=["main"])

    # Admin authentication, employee management, records and dashboard
    app.include_router(admin.router, prefix="/api/v1/admin", tags=["admin"])

    # Employee authentication, timers, manual entries and dashboard
    app.include_router(employee.router, prefix="/api/v1/employee", tags=["employee"])
