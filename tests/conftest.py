"""
Pytest configuration and fixtures
"""
from datetime import date, datetime
from itertools import count

import pytest

from day_timeline.config import TimelineSettings
from day_timeline.models import FocusLogEntry, RoutineDefinition


@pytest.fixture
def today():
    return date(2026, 3, 10)


@pytest.fixture
def now(today):
    """A fixed 'now' of 9:30 AM on the test day."""
    return datetime(today.year, today.month, today.day, 9, 30)


@pytest.fixture
def settings():
    return TimelineSettings()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "timeline.sqlite3"


@pytest.fixture
def make_log(today):
    """Factory for focus logs on the test day given HH:MM strings."""
    ids = count(1)

    def _make(start, end, **kwargs):
        def at(value):
            if value is None:
                return None
            hour, minute = (int(part) for part in value.split(":"))
            return datetime(today.year, today.month, today.day, hour, minute)

        return FocusLogEntry(
            id=str(next(ids)),
            start_instant=at(start),
            end_instant=at(end),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_routine():
    ids = count(1)

    def _make(start_minute, duration_minutes, **kwargs):
        kwargs.setdefault("name", "Routine")
        return RoutineDefinition(
            id=str(next(ids)),
            start_minute=start_minute,
            duration_minutes=duration_minutes,
            **kwargs,
        )

    return _make
