"""Analytics Engine - behavioral metrics derived from the activity log

Philosophy:
    Read, compute, return. Every metric is a pure function of the
    record store and one sampled "now". Nothing is cached, nothing is
    written, and an empty history is a normal state, not an error.

Components:
    windows.py: Timezone policy and day/trailing-window arithmetic
    config.py: YAML-backed thresholds and weights
    models.py: Result dataclasses (JSON-ready via to_dict)

    streak.py: Consecutive active days ending today or yesterday
    adherence.py: Planned timetable slots vs. logged minutes
    momentum.py: Streak + volume + consistency + deep work -> 0-100
    burnout.py: Volume, diary mood/energy, rest days -> risk band
    brain_load.py: Today's cognitive load against a daily capacity
    energy_curve.py: Focus/energy ratings by hour of day
    topics.py: Share of time per activity over a trailing window
    series.py: Minute totals per hour, day or week, and the year heatmap
    scores.py: Test score trends and summary

    stats.py: Per-activity, deep work, and diary statistics
    summary.py: Daily summary, weekly review, plain-text digest
    engine.py: Facade that samples now once and reads one snapshot

Zero Means No Data:
    Sentinels are explicit. A 0 average on the energy curve means
    "no samples", a 0% adherence on an empty timetable means "nothing
    planned". Callers must not read them as real low scores.

Configuration: args/analytics.yaml (override with HABITPULSE_CONFIG)
"""

import os
from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_PATH = Path(os.environ.get("HABITPULSE_CONFIG", PROJECT_ROOT / "args" / "analytics.yaml"))

# Result vocabularies
ADHERENCE_STATUSES = ("done", "partial", "missed")
MOMENTUM_TRENDS = ("rising", "stable", "falling")
RISK_LEVELS = ("low", "medium", "high")
LOAD_STATUSES = ("optimal", "high", "overload")
CHART_RANGES = ("daily", "weekly", "monthly", "all")

HOURS_PER_DAY = 24

__all__ = [
    "PROJECT_ROOT",
    "CONFIG_PATH",
    "ADHERENCE_STATUSES",
    "MOMENTUM_TRENDS",
    "RISK_LEVELS",
    "LOAD_STATUSES",
    "CHART_RANGES",
    "HOURS_PER_DAY",
]
