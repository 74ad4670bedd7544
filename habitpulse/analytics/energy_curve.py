"""
Tool: Energy Curve Aggregator
Purpose: Average focus and energy ratings by hour of day

Looks at rated sessions from the trailing 30 days, buckets them by the
local hour they were logged, and averages each rating on its own. The
curve always has 24 points; an hour without samples reports zeros,
which mean "no data" rather than a poor rating.
"""

import sqlite3
from collections import defaultdict
from datetime import datetime, tzinfo
from statistics import mean
from typing import Iterable

from habitpulse.store import queries
from habitpulse.store.queries import SessionRow

from . import HOURS_PER_DAY
from .models import EnergyCurvePoint
from .windows import round_half_up, trailing_window


def build_energy_curve(sessions: Iterable[SessionRow], tz: tzinfo) -> list[EnergyCurvePoint]:
    """Bucket rated sessions into exactly 24 hourly points."""
    focus_by_hour: dict[int, list[int]] = defaultdict(list)
    energy_by_hour: dict[int, list[int]] = defaultdict(list)
    samples_by_hour: dict[int, int] = defaultdict(int)

    for session in sessions:
        if session.focus_rating is None and session.energy_after is None:
            continue
        hour = session.logged_at.astimezone(tz).hour
        samples_by_hour[hour] += 1
        if session.focus_rating is not None:
            focus_by_hour[hour].append(session.focus_rating)
        if session.energy_after is not None:
            energy_by_hour[hour].append(session.energy_after)

    curve = []
    for hour in range(HOURS_PER_DAY):
        focus = focus_by_hour.get(hour)
        energy = energy_by_hour.get(hour)
        curve.append(
            EnergyCurvePoint(
                hour=hour,
                avg_focus=round_half_up(mean(focus), 1) if focus else 0,
                avg_energy=round_half_up(mean(energy), 1) if energy else 0,
                sample_size=samples_by_hour.get(hour, 0),
            )
        )
    return curve


def peak_hour(curve: list[EnergyCurvePoint]) -> int | None:
    """Hour with the best combined focus + energy average, None without data."""
    rated = [p for p in curve if p.sample_size > 0]
    if not rated:
        return None
    return max(rated, key=lambda p: (p.avg_focus + p.avg_energy, -p.hour)).hour


def compute_energy_curve(
    conn: sqlite3.Connection, now: datetime, window_days: int = 30
) -> list[EnergyCurvePoint]:
    window = trailing_window(now, window_days)
    sessions = queries.sessions_between(conn, window.start_text, window.end_text, rated_only=True)
    return build_energy_curve(sessions, now.tzinfo)
