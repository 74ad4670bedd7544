"""
Tool: Momentum Scorer
Purpose: One 0-100 engagement score from four capped signals

Components (each min(ratio, 1) x 100):
    streak       current streak / 30 days
    volume       trailing-week minutes / 2100 (35 hours)
    consistency  active days in the trailing week / 7
    deep work    sessions >= 45 min in the trailing week / 10

The trend compares the trailing week's volume with the week before it.
"""

import sqlite3
from datetime import datetime
from typing import Any

from habitpulse.logging_config import get_logger
from habitpulse.store import queries

from .models import MomentumScore
from .streak import current_streak
from .windows import ratio_component, round_half_up, trailing_window

logger = get_logger(__name__)


def classify_trend(
    current_minutes: float,
    prior_minutes: float,
    rising_ratio: float = 1.1,
    falling_ratio: float = 0.9,
) -> str:
    """rising / falling / stable; an empty prior week is rising only if this week isn't."""
    if prior_minutes <= 0:
        return "rising" if current_minutes > 0 else "stable"
    if current_minutes > prior_minutes * rising_ratio:
        return "rising"
    if current_minutes < prior_minutes * falling_ratio:
        return "falling"
    return "stable"


def score_momentum(
    streak_days: int,
    week_minutes: int,
    active_days: int,
    deep_sessions: int,
    prior_week_minutes: int,
    config: dict[str, Any],
) -> MomentumScore:
    """Combine raw weekly signals into a MomentumScore."""
    window_days = config.get("window_days", 7)
    weights = config.get("weights", {})

    components = {
        "streak": ratio_component(streak_days, config.get("streak_reference_days", 30)),
        "volume": ratio_component(week_minutes, config.get("volume_reference_minutes", 2100)),
        "consistency": ratio_component(active_days, window_days),
        "deep_work": ratio_component(deep_sessions, config.get("deep_session_reference", 10)),
    }
    weighted = sum(value * weights.get(name, 0.25) for name, value in components.items())
    score = max(0, min(round_half_up(weighted), 100))

    return MomentumScore(
        score=score,
        streak_component=components["streak"],
        volume_component=components["volume"],
        consistency_component=components["consistency"],
        deep_work_component=components["deep_work"],
        trend=classify_trend(
            week_minutes,
            prior_week_minutes,
            config.get("rising_ratio", 1.1),
            config.get("falling_ratio", 0.9),
        ),
    )


def compute_momentum(
    conn: sqlite3.Connection,
    now: datetime,
    config: dict[str, Any],
    deep_session_minutes: int = 45,
    history_days: int = 365,
) -> MomentumScore:
    """Gather the weekly signals from the store and score them."""
    window_days = config.get("window_days", 7)
    week = trailing_window(now, window_days)
    prior = trailing_window(now, window_days, offset=window_days)

    sessions = queries.sessions_between(conn, week.start_text, week.end_text)
    week_minutes = sum(s.minutes for s in sessions)
    active_days = len({s.logged_at.astimezone(now.tzinfo).date() for s in sessions})
    deep_sessions = sum(1 for s in sessions if s.minutes >= deep_session_minutes)
    prior_minutes = queries.minutes_between(conn, prior.start_text, prior.end_text)
    streak_days = current_streak(conn, now, history_days=history_days)

    result = score_momentum(
        streak_days, week_minutes, active_days, deep_sessions, prior_minutes, config
    )
    logger.debug(
        "momentum_computed",
        score=result.score,
        trend=result.trend,
        week_minutes=week_minutes,
        prior_minutes=prior_minutes,
    )
    return result
