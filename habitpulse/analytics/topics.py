"""
Tool: Topic Distribution Aggregator
Purpose: Share of logged time per activity over a trailing window

Minutes are grouped by activity name, sorted descending, and cut to the
top 10. Percentages are taken over the returned entries only, so with
more than ten activities they describe the top set, not the whole
history.
"""

import sqlite3
from collections import defaultdict
from datetime import datetime
from typing import Iterable

from habitpulse.store import queries

from .models import TopicShare
from .windows import round_half_up, trailing_window


def build_topic_shares(
    totals: Iterable[tuple[str, int]], max_entries: int = 10
) -> list[TopicShare]:
    """Rank (name, minutes) pairs and compute percentages over the kept set."""
    ranked = sorted(totals, key=lambda item: (-item[1], item[0]))[:max_entries]
    total = sum(minutes for _, minutes in ranked)
    return [
        TopicShare(
            topic=name,
            minutes=minutes,
            percentage=round_half_up(100 * minutes / total) if total > 0 else 0,
        )
        for name, minutes in ranked
    ]


def compute_topic_distribution(
    conn: sqlite3.Connection, now: datetime, days: int = 30, max_entries: int = 10
) -> list[TopicShare]:
    if days < 1:
        raise ValueError(f"days must be at least 1, got {days}")

    window = trailing_window(now, days)
    minutes_by_name: dict[str, int] = defaultdict(int)
    for session in queries.sessions_between(conn, window.start_text, window.end_text):
        minutes_by_name[session.activity_name] += session.minutes

    return build_topic_shares(minutes_by_name.items(), max_entries)
