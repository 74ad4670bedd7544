"""
Integration tests for the habitpulse/dashboard read API.

Tests the FastAPI analytics routes end to end:
- /api/health
- /api/analytics/* metric endpoints
- 404 / 422 error mapping

Data is written through the record store at fixed instants and every
request pins "now" with the `at` query parameter.
"""

import pytest

from tests.conftest import NOW, TODAY

# Skip all tests in this module if FastAPI is not installed
try:
    from fastapi.testclient import TestClient  # noqa: F401

    HAS_FASTAPI = True
except ImportError:
    HAS_FASTAPI = False

pytestmark = pytest.mark.skipif(not HAS_FASTAPI, reason="FastAPI not installed")

AT = {"at": NOW.isoformat()}


@pytest.fixture
def seeded(add_activity, add_slot, log_at, add_diary):
    """A small week of history."""
    study = add_activity("Deep Study", category="Study")
    gym = add_activity("Gym", category="fitness")
    add_slot(study, 3, "09:00", "10:30")
    for days_ago in range(3):
        log_at(study, 60, days_ago=days_ago, hour=9, focus_rating=4, energy_after=3)
    log_at(gym, 30, days_ago=0, hour=18)
    add_diary(days_ago=0, mood=4, energy=4)
    return {"study": study, "gym": gym}


# ─────────────────────────────────────────────────────────────────────────────
# Health
# ─────────────────────────────────────────────────────────────────────────────


class TestHealthEndpoint:
    def test_health(self, test_client):
        """GET /api/health reports status and the engine timezone."""
        response = test_client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data
        assert data["timezone"]


# ─────────────────────────────────────────────────────────────────────────────
# Core Metrics
# ─────────────────────────────────────────────────────────────────────────────


class TestCoreMetricEndpoints:
    """Tests for the seven core metric routes."""

    def test_streak(self, test_client, seeded):
        response = test_client.get("/api/analytics/streak", params=AT)

        assert response.status_code == 200
        assert response.json() == {"current_streak": 3, "activity_id": None}

    def test_streak_per_activity(self, test_client, seeded):
        params = {**AT, "activity_id": seeded["gym"]}
        response = test_client.get("/api/analytics/streak", params=params)

        assert response.json()["current_streak"] == 1

    def test_adherence_today(self, test_client, seeded):
        response = test_client.get("/api/analytics/adherence", params=AT)

        assert response.status_code == 200
        data = response.json()
        assert data["date"] == TODAY.isoformat()
        assert data["day_of_week"] == 3
        assert data["planned_minutes"] == 90
        assert data["adherence_pct"] == 67
        assert data["slots"][0]["status"] == "partial"

    def test_adherence_for_date(self, test_client, seeded):
        params = {**AT, "date": "2026-03-01"}
        data = test_client.get("/api/analytics/adherence", params=params).json()

        assert data["day_of_week"] == 0
        assert data["planned_minutes"] == 0
        assert data["adherence_pct"] == 0

    def test_adherence_bad_date(self, test_client):
        response = test_client.get("/api/analytics/adherence", params={"date": "yesterday"})
        assert response.status_code == 422

    def test_weekly_adherence(self, test_client, seeded):
        data = test_client.get("/api/analytics/adherence/weekly", params=AT).json()

        assert len(data) == 7
        assert data[-1]["date"] == TODAY.isoformat()

    def test_momentum(self, test_client, seeded):
        data = test_client.get("/api/analytics/momentum", params=AT).json()

        assert 0 <= data["score"] <= 100
        assert data["trend"] == "rising"

    def test_burnout(self, test_client, seeded):
        data = test_client.get("/api/analytics/burnout", params=AT).json()

        assert data == {"risk_score": 0, "risk_level": "low", "factors": []}

    def test_brain_load(self, test_client, seeded):
        """60 min of Study (90 units) + 30 min gym (15 units) = 105/360."""
        data = test_client.get("/api/analytics/brain-load", params=AT).json()

        assert data["current_load"] == 29
        assert data["status"] == "optimal"
        assert data["suggestion"]

    def test_energy_curve(self, test_client, seeded):
        data = test_client.get("/api/analytics/energy-curve", params=AT).json()

        assert len(data) == 24
        assert data[9] == {"hour": 9, "avg_focus": 4.0, "avg_energy": 3.0, "sample_size": 3}

    def test_topics(self, test_client, seeded):
        data = test_client.get("/api/analytics/topics", params={**AT, "days": 7}).json()

        assert data == [
            {"topic": "Deep Study", "minutes": 180, "percentage": 86},
            {"topic": "Gym", "minutes": 30, "percentage": 14},
        ]

    @pytest.mark.parametrize("days", ["0", "-3", "abc"])
    def test_topics_invalid_days(self, test_client, days):
        response = test_client.get("/api/analytics/topics", params={"days": days})
        assert response.status_code == 422


# ─────────────────────────────────────────────────────────────────────────────
# Supplementary Endpoints
# ─────────────────────────────────────────────────────────────────────────────


class TestSupplementaryEndpoints:
    def test_activity_stats(self, test_client, seeded):
        url = f"/api/analytics/activities/{seeded['study']}/stats"
        data = test_client.get(url, params=AT).json()

        assert data["activity_name"] == "Deep Study"
        assert data["total_minutes"] == 180
        assert data["current_streak"] == 3

    def test_activity_stats_unknown(self, test_client):
        response = test_client.get("/api/analytics/activities/9999/stats")

        assert response.status_code == 404
        assert response.json()["code"] == "HTTP_404"

    def test_deep_work(self, test_client, seeded):
        data = test_client.get("/api/analytics/deep-work", params=AT).json()

        assert data["deep_sessions_week"] == 3
        assert data["focus_consistency"] == 75

    def test_diary(self, test_client, seeded):
        data = test_client.get("/api/analytics/diary", params=AT).json()

        assert data["total_entries"] == 1
        assert data["diary_streak"] == 1
        assert data["recent_moods"] == [{"date": TODAY.isoformat(), "mood": 4}]

    def test_daily_summary(self, test_client, seeded):
        data = test_client.get("/api/analytics/summary/daily", params=AT).json()

        assert data["today_minutes"] == 90
        assert data["headline"] == "Daily Summary: 90 minutes today"
        assert data["message"] == "Top activities: Deep Study: 60m, Gym: 30m. 3-day streak!"

    def test_weekly_review(self, test_client, seeded):
        data = test_client.get("/api/analytics/summary/weekly", params=AT).json()

        assert data["total_minutes"] == 210
        assert data["deep_work_sessions"] == 3

    def test_digest(self, test_client, seeded):
        data = test_client.get("/api/analytics/digest", params=AT).json()

        assert data["text"].startswith("Momentum: ")
        assert data["peak_hour"] == 9
        assert data["topics"][0]["topic"] == "Deep Study"

    def test_empty_store_is_not_an_error(self, test_client):
        """Every metric answers on an empty history."""
        for path in (
            "streak",
            "adherence",
            "adherence/weekly",
            "momentum",
            "burnout",
            "brain-load",
            "energy-curve",
            "topics",
            "deep-work",
            "diary",
            "summary/daily",
            "summary/weekly",
            "digest",
            "chart",
            "heatmap",
            "tests/trends",
            "tests/summary",
        ):
            response = test_client.get(f"/api/analytics/{path}", params=AT)
            assert response.status_code == 200, path


# ─────────────────────────────────────────────────────────────────────────────
# Time Series and Test Scores
# ─────────────────────────────────────────────────────────────────────────────


class TestSeriesEndpoints:
    def test_chart_defaults_to_weekly(self, test_client, seeded):
        data = test_client.get("/api/analytics/chart", params=AT).json()

        assert data["chart_range"] == "weekly"
        assert [p["label"] for p in data["points"]] == ["2026-03-02", "2026-03-03", "2026-03-04"]
        assert data["total"] == 210
        assert data["average"] == 70

    def test_chart_daily_for_activity(self, test_client, seeded):
        params = {**AT, "range": "daily", "activity_id": seeded["gym"]}
        data = test_client.get("/api/analytics/chart", params=params).json()

        assert data["points"] == [{"label": "18:00", "value": 30}]
        assert data["activity_id"] == seeded["gym"]

    def test_chart_unknown_range(self, test_client):
        response = test_client.get("/api/analytics/chart", params={"range": "hourly"})
        assert response.status_code == 422

    def test_heatmap(self, test_client, seeded):
        data = test_client.get("/api/analytics/heatmap", params=AT).json()
        assert data == {"2026-03-02": 60, "2026-03-03": 60, "2026-03-04": 90}

    def test_heatmap_invalid_days(self, test_client):
        response = test_client.get("/api/analytics/heatmap", params={"days": 0})
        assert response.status_code == 422


class TestScoreEndpoints:
    @pytest.fixture
    def scores(self, add_score):
        add_score("prelims", "History", 72, 100, "2026-03-01")
        add_score("mains", "Essay", 120, 250, "2026-02-25")

    def test_trends(self, test_client, scores):
        data = test_client.get("/api/analytics/tests/trends").json()
        assert [p["date"] for p in data] == ["2026-02-25", "2026-03-01"]

    def test_trends_by_type(self, test_client, scores):
        data = test_client.get("/api/analytics/tests/trends", params={"test_type": "mains"}).json()
        assert [p["subject"] for p in data] == ["Essay"]

    def test_summary(self, test_client, scores):
        data = test_client.get("/api/analytics/tests/summary").json()

        assert data["count"] == 2
        assert data["avg_percentage"] == 60.0
        assert data["total_tests_mains"] == 1
        assert data["recent"][0]["test_type"] == "prelims"

    def test_unknown_test_type(self, test_client):
        response = test_client.get("/api/analytics/tests/summary", params={"test_type": "finals"})
        assert response.status_code == 422


# ─────────────────────────────────────────────────────────────────────────────
# Schema
# ─────────────────────────────────────────────────────────────────────────────


class TestSchemaVocabularies:
    """Response enums come from the engine's own vocabularies."""

    def test_enums_match_engine(self, test_client):
        from habitpulse.analytics import (
            ADHERENCE_STATUSES,
            CHART_RANGES,
            LOAD_STATUSES,
            MOMENTUM_TRENDS,
            RISK_LEVELS,
        )

        schemas = test_client.get("/api/openapi.json").json()["components"]["schemas"]

        assert schemas["SlotStatus"]["enum"] == list(ADHERENCE_STATUSES)
        assert schemas["Trend"]["enum"] == list(MOMENTUM_TRENDS)
        assert schemas["RiskLevel"]["enum"] == list(RISK_LEVELS)
        assert schemas["LoadStatus"]["enum"] == list(LOAD_STATUSES)
        assert schemas["ChartRange"]["enum"] == list(CHART_RANGES)
