"""
Tool: Streak Calculator
Purpose: Count consecutive active calendar days ending today or yesterday

A streak is not lost the moment the day rolls over: if nothing has been
logged yet today but yesterday was active, the run ending yesterday still
counts. It breaks only once a whole day is skipped.

Usage:
    from habitpulse.analytics.streak import calculate_streak

    calculate_streak(active_dates, today, today - timedelta(days=1))
"""

import sqlite3
from datetime import date, datetime, timedelta
from typing import Iterable

from habitpulse.store import queries

from .windows import day_window


def _normalize(active_dates: Iterable[date]) -> list[date]:
    return sorted(set(active_dates), reverse=True)


def calculate_streak(active_dates: Iterable[date], today: date, yesterday: date) -> int:
    """
    Current consecutive-day streak.

    Args:
        active_dates: Distinct days with at least one session, newest first
        today: Reference "today" in the engine timezone
        yesterday: The day before today

    Returns:
        Number of consecutive days ending today (or yesterday, if today has
        no activity yet); 0 if neither day is active
    """
    days = _normalize(active_dates)
    if not days:
        return 0

    if days[0] == today:
        expected = today
    elif days[0] == yesterday:
        expected = yesterday
    else:
        return 0

    streak = 0
    for day in days:
        if day != expected:
            break
        streak += 1
        expected -= timedelta(days=1)
    return streak


def calculate_longest_streak(active_dates: Iterable[date]) -> int:
    """Longest run of consecutive days anywhere in the history."""
    days = sorted(set(active_dates))
    longest = 0
    run = 0
    previous = None
    for day in days:
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def calculate_diary_streak(entry_dates: Iterable[date], today: date) -> int:
    """Consecutive days with a diary entry counting back from today."""
    present = set(entry_dates)
    streak = 0
    day = today
    while day in present:
        streak += 1
        day -= timedelta(days=1)
    return streak


def current_streak(
    conn: sqlite3.Connection,
    now: datetime,
    activity_id: int | None = None,
    history_days: int = 365,
) -> int:
    """Streak from the store, optionally for a single activity."""
    today = now.date()
    active = queries.distinct_active_days(
        conn,
        now.tzinfo,
        activity_id=activity_id,
        limit=history_days,
        until=day_window(today, now.tzinfo).end_text,
    )
    return calculate_streak(active, today, today - timedelta(days=1))
