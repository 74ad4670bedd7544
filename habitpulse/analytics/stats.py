"""
Supplementary statistics: per activity, deep work, and diary.
"""

import sqlite3
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any

from habitpulse.store import queries

from .models import ActivityStats, DeepWorkStats, DiaryStats
from .streak import calculate_diary_streak, calculate_longest_streak, calculate_streak
from .windows import round_half_up, trailing_window


def compute_activity_stats(
    conn: sqlite3.Connection, now: datetime, activity_id: int
) -> ActivityStats:
    """
    Lifetime totals for one activity plus its streaks.

    Raises:
        LookupError: if the activity does not exist
    """
    activity = queries.activity_by_id(conn, activity_id)
    if activity is None:
        raise LookupError(f"Activity {activity_id} not found")

    sessions = queries.activity_sessions(conn, activity_id)
    minutes_by_day: dict = defaultdict(int)
    for session in sessions:
        minutes_by_day[session.logged_at.astimezone(now.tzinfo).date()] += session.minutes

    total_minutes = sum(s.minutes for s in sessions)
    today = now.date()
    active_days = [day for day in minutes_by_day if day <= today]

    return ActivityStats(
        activity_id=activity_id,
        activity_name=activity["name"],
        total_minutes=total_minutes,
        total_sessions=len(sessions),
        avg_session=round_half_up(total_minutes / len(sessions)) if sessions else 0,
        best_day=max(minutes_by_day.values(), default=0),
        current_streak=calculate_streak(active_days, today, today - timedelta(days=1)),
        longest_streak=calculate_longest_streak(active_days),
    )


def compute_deep_work_stats(
    conn: sqlite3.Connection, now: datetime, config: dict[str, Any]
) -> DeepWorkStats:
    """Deep sessions (>= 45 min by default) over the trailing week."""
    threshold = config.get("min_session_minutes", 45)
    week = trailing_window(now, config.get("window_days", 7))

    sessions = queries.sessions_between(conn, week.start_text, week.end_text)
    deep = [s.minutes for s in sessions if s.minutes >= threshold]

    return DeepWorkStats(
        deep_sessions_week=len(deep),
        total_deep_minutes=sum(deep),
        avg_session_length=round_half_up(sum(deep) / len(deep)) if deep else 0,
        focus_consistency=round_half_up(100 * len(deep) / len(sessions)) if sessions else 0,
        longest_session=max(deep, default=0),
    )


def compute_diary_stats(conn: sqlite3.Connection, now: datetime) -> DiaryStats:
    overview = queries.diary_overview(conn)
    return DiaryStats(
        total_entries=overview["total_entries"],
        diary_streak=calculate_diary_streak(queries.diary_dates(conn), now.date()),
        avg_mood=round_half_up(overview["avg_mood"] or 0, 1),
        avg_energy=round_half_up(overview["avg_energy"] or 0, 1),
        recent_moods=queries.recent_moods(conn),
    )
