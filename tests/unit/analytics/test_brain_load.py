"""Tests for habitpulse/analytics/brain_load.py

Today's minutes, weighted 1.5 for high-cognitive activities and 0.5
otherwise, against a 360-unit daily capacity.
"""

import pytest

from habitpulse.analytics.brain_load import (
    SUGGESTIONS,
    is_high_cognitive_load,
    load_status,
    score_brain_load,
)
from tests.conftest import NOW


@pytest.fixture
def brain_config(analytics_config):
    return analytics_config["brain_load"]


class TestIsHighCognitiveLoad:
    """The classification heuristic, case-sensitive on purpose."""

    def test_category_match(self):
        assert is_high_cognitive_load("Work", "Email")
        assert is_high_cognitive_load("Study", "Reading")

    def test_category_is_case_sensitive(self):
        assert not is_high_cognitive_load("study", "Reading")
        assert not is_high_cognitive_load("work", "Email")

    def test_name_marker(self):
        assert is_high_cognitive_load("other", "Deep Reading")
        assert is_high_cognitive_load(None, "Code Review")

    def test_name_marker_is_case_sensitive(self):
        assert not is_high_cognitive_load("other", "deep breathing")

    def test_lowercase_study_seed_is_low_load(self):
        """The seeded 'Study Session' has category 'study', so it weighs 0.5."""
        assert not is_high_cognitive_load("study", "Study Session")


class TestScoreBrainLoad:
    """Tests for score_brain_load() and load_status()."""

    def test_nothing_logged(self, brain_config):
        result = score_brain_load(0, brain_config)

        assert result.current_load == 0
        assert result.status == "optimal"
        assert result.suggestion == SUGGESTIONS["optimal"]

    def test_capped_at_100(self, brain_config):
        assert score_brain_load(1000, brain_config).current_load == 100

    @pytest.mark.parametrize(
        "load,status",
        [(60, "optimal"), (61, "high"), (90, "high"), (91, "overload"), (100, "overload")],
    )
    def test_status_bands(self, load, status):
        assert load_status(load) == status

    def test_suggestion_matches_status(self, brain_config):
        result = score_brain_load(340, brain_config)

        assert result.status == "overload"
        assert result.suggestion == SUGGESTIONS["overload"]


class TestComputeBrainLoad:
    """Tests for engine.get_brain_load()."""

    def test_empty_day(self, engine):
        result = engine.get_brain_load(now=NOW)
        assert result.current_load == 0
        assert result.status == "optimal"

    def test_weighted_minutes(self, engine, add_activity, log_at):
        """120 deep min (180 units) + 60 gym min (30 units) = 210/360 = 58%."""
        deep = add_activity("Deep Code")
        gym = add_activity("Gym", category="fitness")
        log_at(deep, 120, hour=9)
        log_at(gym, 60, hour=18)

        result = engine.get_brain_load(now=NOW)
        assert result.current_load == 58
        assert result.status == "optimal"

    def test_only_today_counts(self, engine, add_activity, log_at):
        work = add_activity("Project", category="Work")
        log_at(work, 300, days_ago=1)

        assert engine.get_brain_load(now=NOW).current_load == 0

    def test_overload(self, engine, add_activity, log_at):
        work = add_activity("Project", category="Work")
        log_at(work, 240, hour=8)

        result = engine.get_brain_load(now=NOW)
        assert result.current_load == 100
        assert result.status == "overload"
