"""Tests for duration formatting and calendar helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from timetracker.fastapi.core.exceptions import ValidationError
from timetracker.fastapi.core.utils import (
    calendar_date,
    elapsed_seconds,
    format_duration,
    hours_from_seconds,
    parse_duration,
    start_of_month,
    start_of_week,
    to_local_naive,
)


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize("seconds, expected", [
        (0, "0s"),
        (45, "45s"),
        (59, "59s"),
        (60, "1m 0s"),
        (125, "2m 5s"),
        (3599, "59m 59s"),
        (3600, "1h 0m"),
        (3661, "1h 1m"),
        (3719, "1h 1m"),
        (90061, "25h 1m"),
    ])
    def test_buckets(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_negative_is_rejected(self):
        with pytest.raises(ValidationError):
            format_duration(-1)

    @pytest.mark.parametrize("value", [1.5, "60", None, True])
    def test_non_integer_is_rejected(self, value):
        with pytest.raises(ValidationError):
            format_duration(value)


class TestParseDuration:
    """Tests for parse_duration."""

    @pytest.mark.parametrize("seconds", [0, 45, 60, 125, 3599])
    def test_exact_below_an_hour(self, seconds):
        assert parse_duration(format_duration(seconds)) == seconds

    def test_hours_truncate_to_the_minute(self):
        assert parse_duration(format_duration(3661)) == 3660
        assert parse_duration(format_duration(7199)) == 7140

    @pytest.mark.parametrize("seconds", [0, 59, 60, 3599, 3600, 86399])
    def test_stays_in_the_same_bucket(self, seconds):
        parsed = parse_duration(format_duration(seconds))
        assert format_duration(parsed).count(" ") == format_duration(seconds).count(" ")
        assert format_duration(parsed)[-1] == format_duration(seconds)[-1]

    @pytest.mark.parametrize("text", ["", "abc", "1h", "5m", "1h 2s", "-5s", None])
    def test_malformed_text(self, text):
        with pytest.raises(ValidationError):
            parse_duration(text)


class TestCalendarHelpers:
    """Tests for the calendar bucketing helpers."""

    def test_start_of_week_is_monday(self):
        assert start_of_week(date(2024, 3, 11)) == date(2024, 3, 11)  # Monday
        assert start_of_week(date(2024, 3, 15)) == date(2024, 3, 11)  # Friday
        assert start_of_week(date(2024, 3, 17)) == date(2024, 3, 11)  # Sunday

    def test_start_of_month(self):
        assert start_of_month(date(2024, 2, 29)) == date(2024, 2, 1)

    def test_calendar_date_of_naive_timestamp(self):
        assert calendar_date(datetime(2024, 3, 15, 23, 59, 59)) == "2024-03-15"

    def test_aware_timestamps_become_local_naive(self):
        aware = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
        local = to_local_naive(aware)
        assert local.tzinfo is None
        assert local == aware.astimezone().replace(tzinfo=None)
        assert calendar_date(aware) == local.date().isoformat()

    def test_elapsed_seconds_floors(self):
        start = datetime(2024, 3, 15, 9, 0, 0)
        assert elapsed_seconds(start, start + timedelta(seconds=10, milliseconds=999)) == 10
        assert elapsed_seconds(start, start - timedelta(milliseconds=1)) == -1

    def test_hours_from_seconds(self):
        assert hours_from_seconds(5400) == 1.5
        assert hours_from_seconds(None) == 0.0
