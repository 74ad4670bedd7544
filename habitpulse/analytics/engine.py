"""
Tool: Analytics Engine
Purpose: Single entry point for every metric

Each call samples "now" exactly once (unless the caller passes one),
opens one read snapshot of the record store, and hands both to the
component. Passing `now` explicitly makes any result reproducible.

Usage:
    from habitpulse.analytics.engine import AnalyticsEngine

    engine = AnalyticsEngine()                     # config + default DB
    engine.get_momentum().to_dict()
    engine.get_adherence(date(2026, 3, 2))
    engine.get_topic_distribution(days=14)
    engine.get_chart("monthly").to_dict()
    engine.get_score_summary("prelims")

    # Deterministic, e.g. in tests
    engine.get_streak(now=datetime(2026, 3, 2, 21, 0, tzinfo=tz))
"""

from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Any

from habitpulse.logging_config import get_logger
from habitpulse.store.records import read_snapshot

from . import (
    adherence,
    brain_load,
    burnout,
    energy_curve,
    momentum,
    scores,
    series,
    stats,
    summary,
    topics,
)
from .config import load_config
from .models import (
    ActivityStats,
    AdherenceDay,
    BrainLoad,
    BurnoutRisk,
    ChartSeries,
    DailySummary,
    DeepWorkStats,
    DiaryStats,
    EnergyCurvePoint,
    MomentumScore,
    ScoreSummary,
    ScoreTrendPoint,
    TopicShare,
    WeeklyReview,
)
from .streak import calculate_streak, current_streak
from .windows import ensure_aware, resolve_timezone, sample_now

logger = get_logger(__name__)


class AnalyticsEngine:
    """Read-side facade over the record store.

    Args:
        db_path: Database file (defaults to the store's DB_PATH)
        tz: Engine timezone; overrides the configured one
        config: Full `analytics` config dict; loaded from YAML when omitted
    """

    def __init__(
        self,
        db_path: str | Path | None = None,
        tz: str | tzinfo | None = None,
        config: dict[str, Any] | None = None,
    ):
        self.db_path = db_path
        self.config = config if config is not None else load_config()
        self.tz = resolve_timezone(tz if tz is not None else self.config.get("timezone"))

    def _now(self, now: datetime | None) -> datetime:
        if now is None:
            return sample_now(self.tz)
        return ensure_aware(now, self.tz)

    def _section(self, name: str) -> dict[str, Any]:
        return self.config.get(name, {})

    @property
    def _history_days(self) -> int:
        return self._section("streak").get("history_days", 365)

    @property
    def _deep_minutes(self) -> int:
        return self._section("deep_work").get("min_session_minutes", 45)

    # ─────────────────────────────────────────────────────────────────────
    # Core metrics
    # ─────────────────────────────────────────────────────────────────────

    @staticmethod
    def calculate_streak(active_dates: list[date], today: date, yesterday: date) -> int:
        return calculate_streak(active_dates, today, yesterday)

    def get_streak(self, now: datetime | None = None, activity_id: int | None = None) -> int:
        now = self._now(now)
        with read_snapshot(self.db_path) as conn:
            return current_streak(conn, now, activity_id, self._history_days)

    def get_adherence(
        self, day: date | None = None, now: datetime | None = None
    ) -> AdherenceDay:
        now = self._now(now)
        done_ratio = self._section("adherence").get("done_ratio", 0.8)
        with read_snapshot(self.db_path) as conn:
            return adherence.evaluate_day(conn, day or now.date(), self.tz, done_ratio)

    def get_weekly_adherence(self, now: datetime | None = None) -> list[AdherenceDay]:
        now = self._now(now)
        done_ratio = self._section("adherence").get("done_ratio", 0.8)
        with read_snapshot(self.db_path) as conn:
            return adherence.evaluate_week(conn, now, done_ratio)

    def get_momentum(self, now: datetime | None = None) -> MomentumScore:
        now = self._now(now)
        with read_snapshot(self.db_path) as conn:
            return momentum.compute_momentum(
                conn, now, self._section("momentum"), self._deep_minutes, self._history_days
            )

    def get_burnout_risk(self, now: datetime | None = None) -> BurnoutRisk:
        now = self._now(now)
        with read_snapshot(self.db_path) as conn:
            return burnout.compute_burnout(conn, now, self._section("burnout"))

    def get_brain_load(self, now: datetime | None = None) -> BrainLoad:
        now = self._now(now)
        with read_snapshot(self.db_path) as conn:
            return brain_load.compute_brain_load(conn, now, self._section("brain_load"))

    def get_energy_curve(self, now: datetime | None = None) -> list[EnergyCurvePoint]:
        now = self._now(now)
        window_days = self._section("energy_curve").get("window_days", 30)
        with read_snapshot(self.db_path) as conn:
            return energy_curve.compute_energy_curve(conn, now, window_days)

    def get_topic_distribution(
        self, days: int | None = None, now: datetime | None = None
    ) -> list[TopicShare]:
        now = self._now(now)
        section = self._section("topics")
        days = days if days is not None else section.get("default_days", 30)
        with read_snapshot(self.db_path) as conn:
            return topics.compute_topic_distribution(
                conn, now, days, section.get("max_entries", 10)
            )

    # ─────────────────────────────────────────────────────────────────────
    # Supplementary statistics and summaries
    # ─────────────────────────────────────────────────────────────────────

    def get_activity_stats(self, activity_id: int, now: datetime | None = None) -> ActivityStats:
        now = self._now(now)
        with read_snapshot(self.db_path) as conn:
            return stats.compute_activity_stats(conn, now, activity_id)

    def get_deep_work_stats(self, now: datetime | None = None) -> DeepWorkStats:
        now = self._now(now)
        with read_snapshot(self.db_path) as conn:
            return stats.compute_deep_work_stats(conn, now, self._section("deep_work"))

    def get_diary_stats(self, now: datetime | None = None) -> DiaryStats:
        now = self._now(now)
        with read_snapshot(self.db_path) as conn:
            return stats.compute_diary_stats(conn, now)

    def get_daily_summary(self, now: datetime | None = None) -> DailySummary:
        now = self._now(now)
        with read_snapshot(self.db_path) as conn:
            return summary.compute_daily_summary(conn, now, self._history_days)

    def get_weekly_review(self, now: datetime | None = None) -> WeeklyReview:
        now = self._now(now)
        with read_snapshot(self.db_path) as conn:
            return summary.compute_weekly_review(conn, now, self._deep_minutes)

    def get_insight_digest(self, now: datetime | None = None) -> dict[str, Any]:
        """Momentum, burnout, brain load, energy and topics from one snapshot."""
        now = self._now(now)
        topic_section = self._section("topics")
        with read_snapshot(self.db_path) as conn:
            payload = summary.digest_payload(
                momentum.compute_momentum(
                    conn, now, self._section("momentum"), self._deep_minutes, self._history_days
                ),
                burnout.compute_burnout(conn, now, self._section("burnout")),
                brain_load.compute_brain_load(conn, now, self._section("brain_load")),
                energy_curve.compute_energy_curve(
                    conn, now, self._section("energy_curve").get("window_days", 30)
                ),
                topics.compute_topic_distribution(
                    conn,
                    now,
                    topic_section.get("default_days", 30),
                    topic_section.get("max_entries", 10),
                ),
            )
        logger.info("insight_digest_built", lines=payload["text"].count("\n") + 1)
        return payload

    # ─────────────────────────────────────────────────────────────────────
    # Time series and test scores
    # ─────────────────────────────────────────────────────────────────────

    def get_chart(
        self,
        chart_range: str = "weekly",
        activity_id: int | None = None,
        now: datetime | None = None,
    ) -> ChartSeries:
        now = self._now(now)
        with read_snapshot(self.db_path) as conn:
            return series.compute_chart(
                conn, now, chart_range, self._section("series"), activity_id
            )

    def get_heatmap(
        self,
        activity_id: int | None = None,
        days: int | None = None,
        now: datetime | None = None,
    ) -> dict[str, int]:
        now = self._now(now)
        days = days if days is not None else self._section("series").get("heatmap_days", 365)
        with read_snapshot(self.db_path) as conn:
            return series.compute_heatmap(conn, now, days, activity_id)

    def get_score_trends(
        self, test_type: str | None = None, subject: str | None = None
    ) -> list[ScoreTrendPoint]:
        with read_snapshot(self.db_path) as conn:
            return scores.compute_score_trends(conn, test_type, subject)

    def get_score_summary(self, test_type: str | None = None) -> ScoreSummary:
        recent_limit = self._section("scores").get("recent_limit", 10)
        with read_snapshot(self.db_path) as conn:
            return scores.compute_score_summary(conn, test_type, recent_limit)
