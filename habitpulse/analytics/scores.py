"""
Tool: Test Score Analyzer
Purpose: Trend line and summary over recorded practice tests

Percentages are fixed when a score is recorded, so these functions only
aggregate. Test dates are calendar dates and need no timezone handling.
"""

import sqlite3
from collections import defaultdict
from datetime import date
from statistics import mean

from habitpulse.store import TEST_TYPES, queries

from .models import ScoreEntry, ScoreSummary, ScoreTrendPoint, SubjectScore
from .windows import round_half_up


def _check_type(test_type: str | None) -> None:
    if test_type is not None and test_type not in TEST_TYPES:
        raise ValueError(
            f"Invalid test type '{test_type}'. Must be one of: {', '.join(TEST_TYPES)}"
        )


def _entry(row: dict) -> ScoreEntry:
    return ScoreEntry(
        id=row["id"],
        test_type=row["test_type"],
        subject=row["subject"],
        topic=row["topic"],
        marks_obtained=row["marks_obtained"],
        total_marks=row["total_marks"],
        percentage=row["percentage"],
        date=date.fromisoformat(row["date"]),
        duration_minutes=row["duration_minutes"],
        notes=row["notes"],
    )


def compute_score_trends(
    conn: sqlite3.Connection, test_type: str | None = None, subject: str | None = None
) -> list[ScoreTrendPoint]:
    """Every matching score, oldest test first."""
    _check_type(test_type)
    return [
        ScoreTrendPoint(
            date=date.fromisoformat(row["date"]),
            percentage=row["percentage"],
            marks_obtained=row["marks_obtained"],
            total_marks=row["total_marks"],
            subject=row["subject"],
        )
        for row in queries.score_rows(conn, test_type, subject)
    ]


def compute_score_summary(
    conn: sqlite3.Connection, test_type: str | None = None, recent_limit: int = 10
) -> ScoreSummary:
    """
    Averages, extremes and a per-subject breakdown.

    The prelims/mains counts always cover both series, even when the
    rest of the summary is filtered to one of them.
    """
    _check_type(test_type)
    rows = queries.score_rows(conn, test_type)
    type_counts = queries.score_type_counts(conn)

    by_subject: dict[str, list[float]] = defaultdict(list)
    for row in rows:
        by_subject[row["subject"]].append(row["percentage"])
    subjects = [
        SubjectScore(
            subject=subject,
            count=len(pcts),
            avg_pct=round_half_up(mean(pcts), 1),
            best_pct=round_half_up(max(pcts), 1),
        )
        for subject, pcts in by_subject.items()
    ]
    subjects.sort(key=lambda s: (-s.avg_pct, s.subject))

    percentages = [row["percentage"] for row in rows]
    recent = queries.score_rows(conn, test_type, newest_first=True, limit=recent_limit)
    return ScoreSummary(
        count=len(rows),
        avg_percentage=round_half_up(mean(percentages), 1) if percentages else 0,
        best_percentage=round_half_up(max(percentages), 1) if percentages else 0,
        worst_percentage=round_half_up(min(percentages), 1) if percentages else 0,
        total_tests_prelims=type_counts.get("prelims", 0),
        total_tests_mains=type_counts.get("mains", 0),
        by_subject=subjects,
        recent=[_entry(row) for row in recent],
    )
