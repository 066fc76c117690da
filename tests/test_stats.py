"""Tests for dashboard aggregation and record listings."""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import FRIDAY, MONDAY, WEDNESDAY, closed_record, running_record
from timetracker.fastapi.core.exceptions import ForbiddenError
from timetracker.fastapi.core.utils import to_local_naive
from timetracker.fastapi.schemas.time_record import DateRange
from timetracker.fastapi.services import stats, timer
from timetracker.fastapi.services.access import Identity


def as_identity(user):
    return Identity(user_id=user.id, role=user.role)


class TestProductivityScore:
    """Weekly hours against the 40 hour target."""

    @pytest.mark.parametrize("hours, expected", [
        (0, 0),
        (10, 25),
        (20, 50),
        (39.9, 100),
        (40, 100),
        (55, 100),
    ])
    def test_score(self, hours, expected):
        assert stats.productivity_score(hours) == expected

    def test_rounds_half_up(self):
        # 1.0 hour is 2.5 percent
        assert stats.productivity_score(1.0) == 3


class TestCurrentStatus:
    """Status label derived from the active record."""

    def test_idle(self):
        assert stats.current_status(None) == ("Not Working", "Ready to start tracking")

    def test_working(self):
        record = running_record("u1", FRIDAY, task="Design")
        assert stats.current_status(record) == ("Working", "On: Design")

    def test_paused(self):
        record = running_record("u1", FRIDAY, paused=True, task="Design")
        assert stats.current_status(record) == ("Paused", "On: Design")


class TestBuildAdminStats:
    """Pure reduction for the admin dashboard."""

    def test_three_one_hour_days(self):
        records = [
            closed_record("u1", MONDAY.replace(hour=9), 3600),
            closed_record("u2", WEDNESDAY.replace(hour=9), 3600),
            closed_record("u1", FRIDAY.replace(hour=9), 3600),
        ]

        result = stats.build_admin_stats(records, FRIDAY.date(), active_timers=2, total_team_members=5)

        assert result.weekly_total == 3.0
        assert result.days_this_week == 3
        assert result.avg_hours_per_day == 1.0
        assert result.total_hours_today == 1.0
        assert result.active_today == 1
        assert result.active_timers_now == 2
        assert result.total_team_members == 5

    def test_running_records_do_not_count(self):
        records = [
            closed_record("u1", FRIDAY.replace(hour=9), 1800),
            running_record("u2", FRIDAY.replace(hour=8)),
        ]

        result = stats.build_admin_stats(records, FRIDAY.date(), active_timers=1, total_team_members=2)

        assert result.total_hours_today == 0.5
        assert result.active_today == 1

    def test_previous_week_is_ignored(self):
        records = [
            closed_record("u1", MONDAY - timedelta(days=1), 7200),
            closed_record("u1", MONDAY.replace(hour=10), 1800),
        ]

        result = stats.build_admin_stats(records, FRIDAY.date(), active_timers=0, total_team_members=1)

        assert result.weekly_total == 0.5
        assert result.days_this_week == 1
        assert result.total_hours_today == 0.0
        assert result.active_today == 0

    def test_empty(self):
        result = stats.build_admin_stats([], FRIDAY.date(), active_timers=0, total_team_members=0)

        assert result.weekly_total == 0.0
        assert result.avg_hours_per_day == 0.0
        assert result.days_this_week == 0

    def test_distinct_users_today(self):
        records = [
            closed_record("u1", FRIDAY.replace(hour=8), 600),
            closed_record("u1", FRIDAY.replace(hour=10), 600),
            closed_record("u2", FRIDAY.replace(hour=11), 600),
        ]

        result = stats.build_admin_stats(records, FRIDAY.date(), active_timers=0, total_team_members=3)

        assert result.active_today == 2


class TestBuildEmployeeStats:
    """Pure reduction for the employee dashboard."""

    def test_week_and_today(self):
        records = [
            closed_record("u1", MONDAY.replace(hour=9), 8 * 3600),
            closed_record("u1", FRIDAY.replace(hour=9), 2 * 3600),
            closed_record("u1", FRIDAY.replace(hour=13), 3600),
        ]

        result = stats.build_employee_stats(records, FRIDAY.date())

        assert result.today_hours == 3.0
        assert result.today_sessions == 2
        assert result.weekly_total == 11.0
        assert result.days_this_week == 2
        assert result.avg_hours_per_day == 5.5
        assert result.productivity_score == 28
        assert result.current_status == "Not Working"

    def test_saturates_at_forty_hours(self):
        records = [closed_record("u1", MONDAY + timedelta(days=d), 10 * 3600) for d in range(5)]

        result = stats.build_employee_stats(records, FRIDAY.date())

        assert result.weekly_total == 50.0
        assert result.productivity_score == 100

    def test_zero_hours(self):
        result = stats.build_employee_stats([], FRIDAY.date())

        assert result.productivity_score == 0
        assert result.today_sessions == 0

    def test_status_from_active_record(self):
        active = running_record("u1", FRIDAY, task="Refactor")

        result = stats.build_employee_stats([active], FRIDAY.date(), active_record=active)

        assert result.current_status == "Working"
        assert result.status_detail == "On: Refactor"
        assert result.today_sessions == 0


class TestDashboards:
    """Store-backed dashboards."""

    def test_admin_dashboard(self, db, admin, make_employee):
        alice, bob = make_employee(first_name="Alice"), make_employee(first_name="Bob")
        timer.add_manual_entry(db, alice, "Alpha", "Plan", MONDAY.replace(hour=9), MONDAY.replace(hour=10))
        timer.add_manual_entry(db, bob, "Alpha", "Build", WEDNESDAY.replace(hour=9), WEDNESDAY.replace(hour=10))
        timer.add_manual_entry(db, alice, "Beta", "Ship", FRIDAY.replace(hour=9), FRIDAY.replace(hour=10))
        timer.start_timer(db, bob, "Beta", "Ship", now=FRIDAY)

        result = stats.admin_dashboard(db, as_identity(admin), now=FRIDAY)

        assert result.weekly_total == 3.0
        assert result.days_this_week == 3
        assert result.avg_hours_per_day == 1.0
        assert result.total_hours_today == 1.0
        assert result.active_today == 1
        assert result.active_timers_now == 1
        assert result.total_team_members == 2

    def test_admin_dashboard_requires_admin(self, db, employee):
        with pytest.raises(ForbiddenError):
            stats.admin_dashboard(db, as_identity(employee), now=FRIDAY)

    def test_employee_dashboard_only_counts_own_records(self, db, make_employee):
        alice, bob = make_employee(), make_employee()
        timer.add_manual_entry(db, alice, "Alpha", "Plan", FRIDAY.replace(hour=9), FRIDAY.replace(hour=13))
        timer.add_manual_entry(db, bob, "Alpha", "Build", FRIDAY.replace(hour=9), FRIDAY.replace(hour=17))
        record = timer.start_timer(db, alice, "Alpha", "Review", now=FRIDAY)
        timer.pause_timer(db, record.id, alice.id)

        result = stats.employee_dashboard(db, as_identity(alice), now=FRIDAY)

        assert result.today_hours == 4.0
        assert result.weekly_total == 4.0
        assert result.productivity_score == 10
        assert result.current_status == "Paused"
        assert result.status_detail == "On: Review"


class TestListRecords:
    """Scoping and filters of the record listings."""

    @pytest.fixture
    def team(self, db, admin, make_employee):
        alice, bob = make_employee(), make_employee()
        last_month = FRIDAY - timedelta(days=30)
        for user in (alice, bob):
            timer.add_manual_entry(db, user, "Alpha", "Old", last_month, last_month + timedelta(hours=1))
            timer.add_manual_entry(db, user, "Alpha", "Mon", MONDAY, MONDAY + timedelta(hours=1))
            timer.add_manual_entry(db, user, "Beta", "Fri", FRIDAY, FRIDAY + timedelta(minutes=30))
        timer.start_timer(db, alice, "Alpha", "Live", now=FRIDAY)
        return admin, alice, bob

    @pytest.mark.parametrize("date_range", [None, DateRange.ALL, DateRange.TODAY, DateRange.WEEK, DateRange.MONTH])
    @pytest.mark.parametrize("project", [None, "all", "Alpha", "Beta"])
    def test_employee_sees_only_own_closed_records(self, db, team, date_range, project):
        _, alice, _ = team

        records = stats.list_records(db, as_identity(alice), date_range=date_range, project=project, now=FRIDAY)

        assert all(r.user_id == alice.id for r in records)
        assert all(not r.is_running for r in records)

    def test_employee_cannot_ask_for_someone_else(self, db, team):
        _, alice, bob = team

        with pytest.raises(ForbiddenError):
            stats.list_records(db, as_identity(alice), employee_id=bob.id, now=FRIDAY)

    def test_employee_may_name_themselves(self, db, team):
        _, alice, _ = team

        records = stats.list_records(db, as_identity(alice), employee_id=alice.id, now=FRIDAY)

        assert len(records) == 3

    def test_admin_sees_everyone(self, db, team):
        admin, _, _ = team

        records = stats.list_records(db, as_identity(admin), now=FRIDAY)

        assert len(records) == 6
        assert [r.start_time for r in records] == sorted((r.start_time for r in records), reverse=True)

    def test_admin_filters_by_employee(self, db, team):
        admin, _, bob = team

        records = stats.list_records(db, as_identity(admin), employee_id=bob.id, now=FRIDAY)

        assert {r.user_id for r in records} == {bob.id}

    def test_admin_all_employees(self, db, team):
        admin, _, _ = team

        assert len(stats.list_records(db, as_identity(admin), employee_id="all", now=FRIDAY)) == 6

    def test_date_ranges(self, db, team):
        admin, _, _ = team
        identity = as_identity(admin)

        today = stats.list_records(db, identity, date_range=DateRange.TODAY, now=FRIDAY)
        week = stats.list_records(db, identity, date_range=DateRange.WEEK, now=FRIDAY)
        month = stats.list_records(db, identity, date_range=DateRange.MONTH, now=FRIDAY)

        assert {r.task for r in today} == {"Fri"}
        assert {r.task for r in week} == {"Mon", "Fri"}
        assert {r.task for r in month} == {"Mon", "Fri"}
        assert len(week) == 4

    def test_project_filter_is_exact(self, db, team):
        admin, _, _ = team

        records = stats.list_records(db, as_identity(admin), project="Beta", now=FRIDAY)

        assert {r.project for r in records} == {"Beta"}
        assert stats.list_records(db, as_identity(admin), project="Bet", now=FRIDAY) == []

    def test_admin_listing_is_capped(self, db, admin, employee, monkeypatch):
        monkeypatch.setattr(stats.global_settings, "ADMIN_RECORDS_LIMIT", 2)
        for hour in (8, 9, 10):
            start = FRIDAY.replace(hour=hour)
            timer.add_manual_entry(db, employee, "Alpha", f"Task {hour}", start, start + timedelta(minutes=30))

        records = stats.list_records(db, as_identity(admin), now=FRIDAY)

        assert [r.task for r in records] == ["Task 10", "Task 9"]

    def test_employee_listing_is_not_capped(self, db, employee, monkeypatch):
        monkeypatch.setattr(stats.global_settings, "ADMIN_RECORDS_LIMIT", 2)
        for hour in (8, 9, 10):
            start = FRIDAY.replace(hour=hour)
            timer.add_manual_entry(db, employee, "Alpha", f"Task {hour}", start, start + timedelta(minutes=30))

        assert len(stats.list_records(db, as_identity(employee), now=FRIDAY)) == 3


class TestReferenceTime:
    """Timezone-aware reference times are bucketed on the server-local day."""

    AWARE_NOW = datetime(2024, 3, 15, 23, 30, tzinfo=timezone(timedelta(hours=-12)))

    @pytest.fixture
    def late_entry(self, db, employee):
        start = to_local_naive(self.AWARE_NOW).replace(hour=0, minute=0)
        timer.add_manual_entry(db, employee, "Alpha", "Late", start, start + timedelta(minutes=30))
        return employee

    def test_today_listing(self, db, late_entry):
        records = stats.list_records(db, as_identity(late_entry), date_range=DateRange.TODAY, now=self.AWARE_NOW)

        assert [r.task for r in records] == ["Late"]

    def test_employee_dashboard(self, db, late_entry):
        result = stats.employee_dashboard(db, as_identity(late_entry), now=self.AWARE_NOW)

        assert result.today_sessions == 1
        assert result.today_hours == 0.5
