"""Tests for habitpulse/analytics/topics.py

Minutes per activity over a trailing window, top 10 by minutes.
Percentages are computed over the returned entries.
"""

import pytest

from habitpulse.analytics.topics import build_topic_shares
from tests.conftest import NOW


class TestBuildTopicShares:
    """Tests for build_topic_shares()."""

    def test_empty(self):
        assert build_topic_shares([]) == []

    def test_sorted_descending_with_percentages(self):
        shares = build_topic_shares([("Yoga", 10), ("Gym", 30)])

        assert [s.topic for s in shares] == ["Gym", "Yoga"]
        assert [s.percentage for s in shares] == [75, 25]

    def test_ties_broken_by_name(self):
        shares = build_topic_shares([("B", 20), ("A", 20)])
        assert [s.topic for s in shares] == ["A", "B"]

    def test_top_ten_only(self):
        totals = [(f"Activity {i:02d}", 100 - i) for i in range(12)]
        shares = build_topic_shares(totals)

        assert len(shares) == 10
        assert shares[0].topic == "Activity 00"
        assert shares[-1].topic == "Activity 09"

    def test_percentages_over_returned_set(self):
        """With more than ten activities the dropped ones are not in the denominator."""
        totals = [(f"Activity {i:02d}", 10) for i in range(10)] + [("Extra", 1)]
        shares = build_topic_shares(totals)

        assert all(s.percentage == 10 for s in shares)


class TestComputeTopicDistribution:
    """Tests for engine.get_topic_distribution()."""

    def test_empty_store(self, engine):
        assert engine.get_topic_distribution(now=NOW) == []

    def test_groups_by_activity(self, engine, add_activity, log_at):
        gym = add_activity("Gym")
        study = add_activity("Study Session")
        log_at(gym, 30, days_ago=0)
        log_at(gym, 30, days_ago=2)
        log_at(study, 40, days_ago=1)

        shares = engine.get_topic_distribution(now=NOW)

        assert [(s.topic, s.minutes, s.percentage) for s in shares] == [
            ("Gym", 60, 60),
            ("Study Session", 40, 40),
        ]

    def test_days_limits_window(self, engine, add_activity, log_at):
        gym = add_activity("Gym")
        yoga = add_activity("Yoga")
        log_at(gym, 30, days_ago=0)
        log_at(yoga, 30, days_ago=10)

        shares = engine.get_topic_distribution(days=7, now=NOW)
        assert [s.topic for s in shares] == ["Gym"]

    def test_rejects_nonpositive_days(self, engine):
        with pytest.raises(ValueError):
            engine.get_topic_distribution(days=0, now=NOW)
