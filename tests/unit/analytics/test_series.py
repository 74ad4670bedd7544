"""Tests for habitpulse/analytics/series.py

Chart series bucket minutes by local hour, local date, or Monday-based
week; only buckets with logged time appear. The heatmap maps local
dates to minutes over the trailing year.
"""

from datetime import datetime, timezone

import pytest

from habitpulse.analytics.series import build_chart
from tests.conftest import NOW, TZ


def utc(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 3, day, hour, minute, tzinfo=timezone.utc)


# ─────────────────────────────────────────────────────────────────────────────
# Pure Bucketing
# ─────────────────────────────────────────────────────────────────────────────


class TestBuildChart:
    """Tests for build_chart()."""

    def test_daily_buckets_by_local_hour(self):
        """04:00 and 04:20 UTC are 09:30 and 09:50 at +05:30."""
        entries = [(utc(4, 4), 30), (utc(4, 4, 20), 15), (utc(4, 10), 20)]

        chart = build_chart(entries, TZ, "daily")

        assert [(p.label, p.value) for p in chart.points] == [("09:00", 45), ("15:00", 20)]
        assert chart.total == 65
        assert chart.average == 33

    def test_weekly_buckets_by_local_date(self):
        """19:00 UTC on the 3rd is already the 4th locally."""
        chart = build_chart([(utc(3, 19), 30), (utc(4, 3), 30)], TZ, "weekly")

        assert [(p.label, p.value) for p in chart.points] == [("2026-03-04", 60)]

    def test_all_buckets_by_monday_week(self):
        """2026-03-02 (Monday) starts W09; Sunday 2026-03-01 is still W08."""
        chart = build_chart([(utc(2, 6), 40), (utc(1, 6), 20), (utc(4, 6), 10)], TZ, "all")

        assert [(p.label, p.value) for p in chart.points] == [("2026-W08", 20), ("2026-W09", 50)]

    def test_empty(self):
        chart = build_chart([], TZ, "monthly")

        assert chart.points == []
        assert chart.total == 0
        assert chart.average == 0

    def test_to_dict(self):
        chart = build_chart([(utc(4, 4), 30)], TZ, "daily", activity_id=3)

        assert chart.to_dict() == {
            "chart_range": "daily",
            "activity_id": 3,
            "points": [{"label": "09:00", "value": 30}],
            "total": 30,
            "average": 30,
        }


# ─────────────────────────────────────────────────────────────────────────────
# Store-backed
# ─────────────────────────────────────────────────────────────────────────────


class TestChartFromStore:
    """Tests for engine.get_chart()."""

    def test_weekly_is_trailing_seven_days(self, engine, add_activity, log_at):
        study = add_activity("Study Session")
        log_at(study, 60, days_ago=0)
        log_at(study, 30, days_ago=2)
        log_at(study, 45, days_ago=7)

        chart = engine.get_chart("weekly", now=NOW)

        assert [(p.label, p.value) for p in chart.points] == [
            ("2026-03-02", 30),
            ("2026-03-04", 60),
        ]
        assert chart.total == 90
        assert chart.average == 45

    def test_monthly_reaches_further_back(self, engine, add_activity, log_at):
        study = add_activity("Study Session")
        log_at(study, 60, days_ago=0)
        log_at(study, 30, days_ago=2)
        log_at(study, 45, days_ago=7)
        log_at(study, 10, days_ago=30)

        chart = engine.get_chart("monthly", now=NOW)

        assert len(chart.points) == 3
        assert chart.total == 135

    def test_daily_is_today_only(self, engine, add_activity, log_at):
        study = add_activity("Study Session")
        log_at(study, 60, days_ago=0, hour=9)
        log_at(study, 30, days_ago=1, hour=9)

        chart = engine.get_chart("daily", now=NOW)

        assert [(p.label, p.value) for p in chart.points] == [("09:00", 60)]

    def test_all_history_by_week(self, engine, add_activity, log_at):
        study = add_activity("Study Session")
        log_at(study, 60, days_ago=0)
        log_at(study, 30, days_ago=7)

        chart = engine.get_chart("all", now=NOW)

        assert [(p.label, p.value) for p in chart.points] == [("2026-W08", 30), ("2026-W09", 60)]

    def test_future_sessions_ignored(self, engine, add_activity, log_at):
        study = add_activity("Study Session")
        log_at(study, 60, days_ago=-1)

        assert engine.get_chart("all", now=NOW).points == []

    def test_activity_filter(self, engine, add_activity, log_at):
        study = add_activity("Study Session")
        gym = add_activity("Gym")
        log_at(study, 60, days_ago=0)
        log_at(gym, 30, days_ago=0)

        chart = engine.get_chart("weekly", activity_id=gym, now=NOW)

        assert chart.total == 30
        assert chart.activity_id == gym

    def test_unknown_range(self, engine):
        with pytest.raises(ValueError):
            engine.get_chart("hourly", now=NOW)


class TestHeatmapFromStore:
    """Tests for engine.get_heatmap()."""

    def test_minutes_per_local_date(self, engine, add_activity, log_at):
        study = add_activity("Study Session")
        log_at(study, 60, days_ago=0, hour=9)
        log_at(study, 30, days_ago=0, hour=18)
        log_at(study, 45, days_ago=3)

        heatmap = engine.get_heatmap(now=NOW)

        assert heatmap == {"2026-03-01": 45, "2026-03-04": 90}
        assert list(heatmap) == ["2026-03-01", "2026-03-04"]

    def test_early_morning_counts_for_local_day(self, engine, add_activity, log_at):
        """02:00 at +05:30 is the previous UTC day."""
        gym = add_activity("Gym")
        log_at(gym, 30, days_ago=0, hour=2)

        assert engine.get_heatmap(now=NOW) == {"2026-03-04": 30}

    def test_trailing_year_by_default(self, engine, add_activity, log_at):
        study = add_activity("Study Session")
        log_at(study, 60, days_ago=400)

        assert engine.get_heatmap(now=NOW) == {}
        assert engine.get_heatmap(days=500, now=NOW) == {"2025-01-28": 60}

    def test_activity_filter(self, engine, add_activity, log_at):
        study = add_activity("Study Session")
        gym = add_activity("Gym")
        log_at(study, 60, days_ago=0)
        log_at(gym, 30, days_ago=1)

        assert engine.get_heatmap(activity_id=gym, now=NOW) == {"2026-03-03": 30}
