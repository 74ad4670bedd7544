"""Shared test fixtures for HabitPulse tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- A fixed engine timezone and a fixed "now"
- Factories for activities, sessions, slots, diary entries, and test scores

Timestamps are written through the store API at explicit instants, so
every metric under test is a pure function of the fixture data.

Usage:
    def test_something(engine, add_activity, log_at):
        gym = add_activity("Gym", category="fitness")
        log_at(gym, 45, days_ago=0, hour=9)
        assert engine.get_streak(now=NOW) == 1
"""

import copy
import os
import tempfile
from collections.abc import Callable, Generator
from datetime import datetime, time, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Path and Time Constants
# ─────────────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).parent.parent

# Fixed offset, so local-vs-UTC day boundaries are exercised without tzdata
TZ = timezone(timedelta(hours=5, minutes=30))

# Wednesday evening; 0 = Sunday makes this day_of_week 3
NOW = datetime(2026, 3, 4, 21, 0, tzinfo=TZ)
TODAY = NOW.date()


def local_time(days_ago: int = 0, hour: int = 10, minute: int = 0) -> datetime:
    """An aware instant in TZ, `days_ago` calendar days before TODAY."""
    day = TODAY - timedelta(days=days_ago)
    return datetime.combine(day, time(hour, minute), tzinfo=TZ)


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        os.unlink(db_path)


@pytest.fixture
def store_db(temp_db: Path) -> Generator[Path, None, None]:
    """Point the record store at the temporary database and create the schema."""
    with patch("habitpulse.store.records.DB_PATH", temp_db):
        from habitpulse.store.records import init_db

        init_db(seed=False)
        yield temp_db


@pytest.fixture
def analytics_config() -> dict:
    """A private copy of the built-in defaults."""
    from habitpulse.analytics.config import DEFAULT_CONFIG

    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def engine(store_db: Path, analytics_config: dict):
    """An engine over the temporary database in the fixed test timezone."""
    from habitpulse.analytics.engine import AnalyticsEngine

    return AnalyticsEngine(db_path=store_db, tz=TZ, config=analytics_config)


# ─────────────────────────────────────────────────────────────────────────────
# Data Factories
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def add_activity(store_db: Path) -> Callable[..., int]:
    """Create an activity and return its id."""
    from habitpulse.store.records import create_activity

    def _add(name: str, category: str = "other", **kwargs) -> int:
        result = create_activity(name, category=category, **kwargs)
        assert result["success"] is True, result
        return result["data"]["activity_id"]

    return _add


@pytest.fixture
def log_at(store_db: Path) -> Callable[..., int]:
    """Log a session `days_ago` days before TODAY at a local wall-clock time."""
    from habitpulse.store.records import log_session

    def _log(
        activity_id: int,
        minutes: int,
        days_ago: int = 0,
        hour: int = 10,
        minute: int = 0,
        **kwargs,
    ) -> int:
        result = log_session(
            activity_id,
            minutes,
            logged_at=local_time(days_ago, hour, minute),
            **kwargs,
        )
        assert result["success"] is True, result
        return result["data"]["session_id"]

    return _log


@pytest.fixture
def add_slot(store_db: Path) -> Callable[..., int]:
    """Create a timetable slot and return its id."""
    from habitpulse.store.records import upsert_slot

    def _add(activity_id: int, day_of_week: int, start: str, end: str, **kwargs) -> int:
        result = upsert_slot(day_of_week, start, end, activity_id, **kwargs)
        assert result["success"] is True, result
        return result["data"]["slot_id"]

    return _add


@pytest.fixture
def add_diary(store_db: Path) -> Callable[..., int]:
    """Write a diary entry `days_ago` days before TODAY."""
    from habitpulse.store.records import upsert_diary_entry

    def _add(days_ago: int = 0, mood: int | None = None, energy: int | None = None) -> int:
        result = upsert_diary_entry(
            TODAY - timedelta(days=days_ago), mood=mood, energy_level=energy
        )
        assert result["success"] is True, result
        return result["data"]["entry_id"]

    return _add


@pytest.fixture
def add_score(store_db: Path) -> Callable[..., int]:
    """Record a practice test result and return its id."""
    from habitpulse.store.records import record_test_score

    def _add(
        test_type: str, subject: str, marks: float, total: float, test_date: str, **kwargs
    ) -> int:
        result = record_test_score(test_type, subject, marks, total, test_date=test_date, **kwargs)
        assert result["success"] is True, result
        return result["data"]["score_id"]

    return _add
