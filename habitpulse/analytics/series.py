"""
Tool: Time Series Aggregator
Purpose: Minute totals bucketed for charts and the calendar heatmap

Ranges:
    daily    today, by local hour ("09:00")
    weekly   trailing 7 days, by local date
    monthly  trailing 30 days, by local date
    all      all history up to today, by Monday-based week ("2026-W09")

Only buckets with logged time appear, in label order, and the average is
taken over those buckets. The heatmap is a {date: minutes} map over the
trailing year, again with empty days left out.
"""

import sqlite3
from collections import defaultdict
from datetime import datetime, tzinfo
from typing import Any, Iterable

from habitpulse.store import queries

from . import CHART_RANGES
from .models import ChartPoint, ChartSeries
from .windows import round_half_up, trailing_window


def bucket_label(moment: datetime, tz: tzinfo, chart_range: str) -> str:
    local = moment.astimezone(tz)
    if chart_range == "daily":
        return f"{local.hour:02d}:00"
    if chart_range == "all":
        return local.strftime("%Y-W%W")
    return local.date().isoformat()


def build_chart(
    entries: Iterable[tuple[datetime, int]],
    tz: tzinfo,
    chart_range: str,
    activity_id: int | None = None,
) -> ChartSeries:
    """Sum (instant, minutes) pairs into labelled buckets."""
    totals: dict[str, int] = defaultdict(int)
    for logged_at, minutes in entries:
        totals[bucket_label(logged_at, tz, chart_range)] += minutes

    points = [ChartPoint(label=label, value=totals[label]) for label in sorted(totals)]
    total = sum(p.value for p in points)
    return ChartSeries(
        chart_range=chart_range,
        activity_id=activity_id,
        points=points,
        total=total,
        average=round_half_up(total / len(points)) if points else 0,
    )


def compute_chart(
    conn: sqlite3.Connection,
    now: datetime,
    chart_range: str,
    config: dict[str, Any],
    activity_id: int | None = None,
) -> ChartSeries:
    if chart_range not in CHART_RANGES:
        raise ValueError(
            f"Unknown chart range '{chart_range}'. Must be one of: {', '.join(CHART_RANGES)}"
        )

    today = trailing_window(now, 1)
    if chart_range == "daily":
        start = today.start_text
    elif chart_range == "weekly":
        start = trailing_window(now, config.get("week_days", 7)).start_text
    elif chart_range == "monthly":
        start = trailing_window(now, config.get("month_days", 30)).start_text
    else:
        start = None

    entries = queries.minute_entries(conn, today.end_text, start, activity_id)
    return build_chart(entries, now.tzinfo, chart_range, activity_id)


def compute_heatmap(
    conn: sqlite3.Connection,
    now: datetime,
    days: int = 365,
    activity_id: int | None = None,
) -> dict[str, int]:
    """Minutes per local date over the trailing `days`, oldest first."""
    window = trailing_window(now, days)
    totals: dict[str, int] = defaultdict(int)
    for logged_at, minutes in queries.minute_entries(
        conn, window.end_text, window.start_text, activity_id
    ):
        totals[logged_at.astimezone(now.tzinfo).date().isoformat()] += minutes
    return dict(sorted(totals.items()))
