"""
Tool: Brain Load Estimator
Purpose: Today's cognitive load as a percentage of a daily capacity

High-cognitive sessions weigh 1.5 units per minute, everything else
0.5. 360 units (six hours of deep-work equivalent) is 100%.

What counts as high-cognitive is decided in one place,
is_high_cognitive_load(), so the heuristic can be swapped without
touching the arithmetic.
"""

import sqlite3
from datetime import datetime
from typing import Any, Iterable

from habitpulse.store import queries

from .models import BrainLoad
from .windows import day_window, round_half_up

SUGGESTIONS = {
    "optimal": "You have mental capacity available.",
    "high": "High load. Consider a break soon.",
    "overload": "Brain fried. Switch to low-focus tasks or rest.",
}


def is_high_cognitive_load(
    category: str | None,
    name: str | None,
    categories: Iterable[str] = ("Work", "Study"),
    name_markers: Iterable[str] = ("Code", "Deep"),
) -> bool:
    """
    Exact category match, or a case-sensitive substring of the name.

    "study" does not match "Study"; existing numbers depend on that.
    """
    if category in tuple(categories):
        return True
    return any(marker in (name or "") for marker in name_markers)


def load_status(current_load: int, overload_above: int = 90, high_above: int = 60) -> str:
    if current_load > overload_above:
        return "overload"
    if current_load > high_above:
        return "high"
    return "optimal"


def score_brain_load(load_units: float, config: dict[str, Any]) -> BrainLoad:
    capacity = config.get("capacity_units", 360)
    current_load = min(round_half_up(100 * load_units / capacity), 100) if capacity > 0 else 0
    status = load_status(
        current_load, config.get("overload_above", 90), config.get("high_above", 60)
    )
    return BrainLoad(current_load=current_load, status=status, suggestion=SUGGESTIONS[status])


def compute_brain_load(
    conn: sqlite3.Connection, now: datetime, config: dict[str, Any]
) -> BrainLoad:
    """Weight today's sessions and compare them with the daily capacity."""
    today = day_window(now.date(), now.tzinfo)
    categories = config.get("high_load_categories", ["Work", "Study"])
    markers = config.get("high_load_name_markers", ["Code", "Deep"])
    high_weight = config.get("high_load_weight", 1.5)
    low_weight = config.get("low_load_weight", 0.5)

    load_units = 0.0
    for session in queries.sessions_between(conn, today.start_text, today.end_text):
        heavy = is_high_cognitive_load(
            session.category, session.activity_name, categories, markers
        )
        load_units += session.minutes * (high_weight if heavy else low_weight)

    return score_brain_load(load_units, config)
