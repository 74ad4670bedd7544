"""Record Store - the local activity log the analytics engine reads from

Philosophy:
    Append-mostly. Sessions are written once and never edited; the
    engine only ever reads. Validation happens at write time so the
    read side can trust what it finds.

Components:
    records.py: Schema, connections, and validated writes
        - Activities (unique names, free-form categories)
        - Sessions (minutes > 0, optional 1-5 focus/energy ratings)
        - Timetable slots (weekly plan, same-day HH:MM ranges)
        - Diary entries (one per calendar date)
        - Test scores (prelims or mains, percentage fixed at write time)

    queries.py: Read-only queries issued by the engine
        - Distinct active days
        - Minute sums over a time range
        - Raw session rows with activity name/category/ratings
        - Diary mood/energy averages
        - Minute entries for chart buckets, test score rows

Timestamps:
    Stored as UTC text ("YYYY-MM-DD HH:MM:SS") so that range filters
    compare lexically. Local-day bucketing is the engine's job.

Database: data/habitpulse.db (override with HABITPULSE_DB_PATH)
"""

import os
from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("HABITPULSE_DB_PATH", PROJECT_ROOT / "data" / "habitpulse.db"))

# Session sources
SESSION_SOURCES = ("manual", "timer", "bot")

# Test score series
TEST_TYPES = ("prelims", "mains")

# Ratings are 1-5 inclusive
RATING_RANGE = (1, 5)

# Stored timestamp format (UTC)
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_ACTIVITIES = (
    {"name": "Reading Newspaper", "category": "study", "icon": "📰", "color": "#6C63FF"},
    {"name": "Current Affairs", "category": "study", "icon": "🌍", "color": "#00B4D8"},
    {"name": "Prelims Test", "category": "test", "icon": "📝", "color": "#FF6B6B"},
    {"name": "Mains Test", "category": "test", "icon": "✍️", "color": "#F77F00"},
    {"name": "Gym", "category": "fitness", "icon": "💪", "color": "#06D6A0"},
    {"name": "Yoga", "category": "fitness", "icon": "🧘", "color": "#8338EC"},
    {"name": "Study Session", "category": "study", "icon": "📚", "color": "#FB5607"},
)

__all__ = [
    "PROJECT_ROOT",
    "DB_PATH",
    "SESSION_SOURCES",
    "TEST_TYPES",
    "RATING_RANGE",
    "TIMESTAMP_FORMAT",
    "DEFAULT_ACTIVITIES",
]
