"""
Tool: Burnout Risk Estimator
Purpose: Additive risk score from volume, diary mood/energy, and rest days

Factors are evaluated independently and each adds points:
    trailing-week minutes > 2400        +40  "high volume"
    (otherwise) > 1800                  +20
    average diary mood < 2.5            +30  "low mood trend"
    average diary energy < 2.5          +20  "low energy trend"
    a session on every day of the week  +10  "no rest days"

Band: high >= 60, medium >= 30, else low. A missing diary is no signal,
never a low score.
"""

import sqlite3
from datetime import datetime
from typing import Any

from habitpulse.logging_config import get_logger
from habitpulse.store import queries

from .models import BurnoutRisk
from .windows import trailing_window

logger = get_logger(__name__)


def risk_band(score: int, high_band: int = 60, medium_band: int = 30) -> str:
    if score >= high_band:
        return "high"
    if score >= medium_band:
        return "medium"
    return "low"


def score_burnout(
    week_minutes: int,
    avg_mood: float | None,
    avg_energy: float | None,
    rest_days: int,
    config: dict[str, Any],
) -> BurnoutRisk:
    """
    Score burnout risk from weekly signals.

    Args:
        week_minutes: Session minutes over the trailing week
        avg_mood: Average diary mood, None when no entry carries one
        avg_energy: Average diary energy, None when no entry carries one
        rest_days: Days in the trailing week without any session
        config: The `burnout` config section

    Returns:
        BurnoutRisk with the score clamped to 0-100
    """
    score = 0
    factors = []

    if week_minutes > config.get("high_volume_minutes", 2400):
        score += config.get("high_volume_points", 40)
        factors.append("high volume")
    elif week_minutes > config.get("elevated_volume_minutes", 1800):
        score += config.get("elevated_volume_points", 20)

    if avg_mood is not None and avg_mood < config.get("low_mood_threshold", 2.5):
        score += config.get("low_mood_points", 30)
        factors.append("low mood trend")

    if avg_energy is not None and avg_energy < config.get("low_energy_threshold", 2.5):
        score += config.get("low_energy_points", 20)
        factors.append("low energy trend")

    if rest_days == 0:
        score += config.get("no_rest_points", 10)
        factors.append("no rest days")

    score = max(0, min(score, 100))
    return BurnoutRisk(
        risk_score=score,
        risk_level=risk_band(score, config.get("high_band", 60), config.get("medium_band", 30)),
        factors=factors,
    )


def compute_burnout(
    conn: sqlite3.Connection, now: datetime, config: dict[str, Any]
) -> BurnoutRisk:
    """Gather the trailing-week signals from the store and score them."""
    week = trailing_window(now, config.get("window_days", 7))

    sessions = queries.sessions_between(conn, week.start_text, week.end_text)
    week_minutes = sum(s.minutes for s in sessions)
    active_days = {s.logged_at.astimezone(now.tzinfo).date() for s in sessions}
    rest_days = sum(1 for day in week.days if day not in active_days)
    avg_mood, avg_energy = queries.diary_averages(conn, week.first_day, week.last_day)

    result = score_burnout(week_minutes, avg_mood, avg_energy, rest_days, config)
    logger.debug(
        "burnout_computed",
        score=result.risk_score,
        level=result.risk_level,
        factors=result.factors,
    )
    return result
