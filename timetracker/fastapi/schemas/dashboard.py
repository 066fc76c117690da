"""
Pydantic schemas for dashboard statistics.
"""

from pydantic import Field

from timetracker.fastapi.schemas.user import CamelModel


class AdminDashboardStats(CamelModel):
    """Team-wide statistics for the admin dashboard."""

    total_hours_today: float = Field(..., description="Closed hours recorded today, all users")
    weekly_total: float = Field(..., description="Closed hours since Monday, all users")
    active_timers_now: int = Field(..., description="Running or paused timers right now")
    days_this_week: int = Field(..., description="Distinct dates with closed records this week")
    total_team_members: int = Field(..., description="Number of employee accounts")
    active_today: int = Field(..., description="Distinct users with closed records today")
    avg_hours_per_day: float = Field(..., description="Weekly hours over days worked this week")


class EmployeeDashboardStats(CamelModel):
    """Personal statistics for the employee dashboard."""

    today_hours: float
    today_sessions: int
    weekly_total: float
    days_this_week: int
    avg_hours_per_day: float
    current_status: str = Field(..., examples=["Working", "Paused", "Not Working"])
    status_detail: str = Field(..., examples=["On: Landing page layout", "Ready to start tracking"])
    productivity_score: int = Field(..., ge=0, le=100, description="Weekly hours against a 40 hour target")
