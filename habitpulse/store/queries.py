"""
Read-only queries issued by the analytics engine.

Every function takes an open connection (normally the one yielded by
records.read_snapshot) and never writes. Range bounds are stored-UTC
text, half-open: start <= logged_at < end.
"""

import sqlite3
from dataclasses import dataclass
from datetime import date, datetime, tzinfo

from habitpulse.analytics.windows import from_db_timestamp


@dataclass(frozen=True)
class SessionRow:
    """A session joined with the activity fields the engine needs."""

    id: int
    activity_id: int
    activity_name: str
    category: str
    minutes: int
    logged_at: datetime
    focus_rating: int | None = None
    energy_after: int | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "SessionRow":
        return cls(
            id=row["id"],
            activity_id=row["activity_id"],
            activity_name=row["activity_name"],
            category=row["category"],
            minutes=row["minutes"],
            logged_at=from_db_timestamp(row["logged_at"]),
            focus_rating=row["focus_rating"],
            energy_after=row["energy_after"],
        )


def distinct_active_days(
    conn: sqlite3.Connection,
    tz: tzinfo,
    activity_id: int | None = None,
    limit: int = 365,
    until: str | None = None,
) -> list[date]:
    """
    Distinct local calendar days with at least one session, newest first.

    Bucketing happens here rather than in SQL because SQLite's
    'localtime' modifier uses the host zone, not the engine zone.
    """
    query = "SELECT logged_at FROM activity_logs"
    conditions = []
    params: list = []
    if activity_id is not None:
        conditions.append("activity_id = ?")
        params.append(activity_id)
    if until is not None:
        conditions.append("logged_at < ?")
        params.append(until)
    if conditions:
        query += " WHERE " + " AND ".join(conditions)
    query += " ORDER BY logged_at DESC"

    days: list[date] = []
    seen: set[date] = set()
    for row in conn.execute(query, params):
        day = from_db_timestamp(row["logged_at"]).astimezone(tz).date()
        if day not in seen:
            seen.add(day)
            days.append(day)
            if len(days) >= limit:
                break
    return sorted(days, reverse=True)


def minutes_between(
    conn: sqlite3.Connection, start: str, end: str, activity_id: int | None = None
) -> int:
    """Total session minutes logged in [start, end)."""
    query = """
        SELECT COALESCE(SUM(minutes), 0) AS total FROM activity_logs
        WHERE logged_at >= ? AND logged_at < ?
    """
    params: list = [start, end]
    if activity_id is not None:
        query += " AND activity_id = ?"
        params.append(activity_id)
    return conn.execute(query, params).fetchone()["total"]


def sessions_between(
    conn: sqlite3.Connection, start: str, end: str, rated_only: bool = False
) -> list[SessionRow]:
    """Raw sessions in [start, end), oldest first, with activity name and category."""
    query = """
        SELECT l.id, l.activity_id, l.minutes, l.logged_at, l.focus_rating, l.energy_after,
               a.name AS activity_name, a.category AS category
        FROM activity_logs l JOIN activities a ON l.activity_id = a.id
        WHERE l.logged_at >= ? AND l.logged_at < ?
    """
    if rated_only:
        query += " AND (l.focus_rating IS NOT NULL OR l.energy_after IS NOT NULL)"
    query += " ORDER BY l.logged_at, l.id"
    return [SessionRow.from_row(r) for r in conn.execute(query, (start, end))]


def activity_sessions(conn: sqlite3.Connection, activity_id: int) -> list[SessionRow]:
    """Every session of one activity, oldest first."""
    rows = conn.execute(
        """
        SELECT l.id, l.activity_id, l.minutes, l.logged_at, l.focus_rating, l.energy_after,
               a.name AS activity_name, a.category AS category
        FROM activity_logs l JOIN activities a ON l.activity_id = a.id
        WHERE l.activity_id = ?
        ORDER BY l.logged_at, l.id
    """,
        (activity_id,),
    )
    return [SessionRow.from_row(r) for r in rows]


def activity_by_id(conn: sqlite3.Connection, activity_id: int) -> dict | None:
    row = conn.execute("SELECT * FROM activities WHERE id = ?", (activity_id,)).fetchone()
    return dict(row) if row else None


def slots_for_weekday(conn: sqlite3.Connection, day_of_week: int) -> list[dict]:
    """Active timetable slots for a weekday (0 = Sunday), ordered by start time."""
    rows = conn.execute(
        """
        SELECT t.*, a.name AS activity_name, a.icon AS activity_icon
        FROM timetable_slots t JOIN activities a ON t.activity_id = a.id
        WHERE t.day_of_week = ? AND t.is_active = 1
        ORDER BY t.start_time, t.id
    """,
        (day_of_week,),
    ).fetchall()
    return [dict(r) for r in rows]


def diary_averages(
    conn: sqlite3.Connection, first_day: date, last_day: date
) -> tuple[float | None, float | None]:
    """
    Average mood and energy over diary entries dated first_day..last_day.

    AVG skips NULLs, so a missing rating is absent signal. Returns None
    for a rating with no values at all.
    """
    row = conn.execute(
        """
        SELECT AVG(mood) AS avg_mood, AVG(energy_level) AS avg_energy
        FROM diary_entries
        WHERE date >= ? AND date <= ?
    """,
        (first_day.isoformat(), last_day.isoformat()),
    ).fetchone()
    return row["avg_mood"], row["avg_energy"]


def diary_overview(conn: sqlite3.Connection) -> dict:
    """Entry count plus all-time mood/energy averages over entries with a mood."""
    total = conn.execute("SELECT COUNT(*) AS cnt FROM diary_entries").fetchone()["cnt"]
    averages = conn.execute(
        """
        SELECT AVG(mood) AS avg_mood, AVG(energy_level) AS avg_energy
        FROM diary_entries WHERE mood IS NOT NULL
    """
    ).fetchone()
    return {
        "total_entries": total,
        "avg_mood": averages["avg_mood"],
        "avg_energy": averages["avg_energy"],
    }


def diary_dates(conn: sqlite3.Connection, limit: int = 366) -> list[date]:
    """Dates with a diary entry, newest first."""
    rows = conn.execute(
        "SELECT date FROM diary_entries ORDER BY date DESC LIMIT ?", (limit,)
    ).fetchall()
    return [date.fromisoformat(r["date"]) for r in rows]


def recent_moods(conn: sqlite3.Connection, limit: int = 14) -> list[dict]:
    """Latest diary moods, oldest first."""
    rows = conn.execute(
        """
        SELECT date, mood FROM diary_entries
        WHERE mood IS NOT NULL
        ORDER BY date DESC LIMIT ?
    """,
        (limit,),
    ).fetchall()
    return [{"date": r["date"], "mood": r["mood"]} for r in reversed(rows)]


def minute_entries(
    conn: sqlite3.Connection,
    end: str,
    start: str | None = None,
    activity_id: int | None = None,
) -> list[tuple[datetime, int]]:
    """(logged_at, minutes) pairs in [start, end), oldest first. No start means all history."""
    query = "SELECT logged_at, minutes FROM activity_logs WHERE logged_at < ?"
    params: list = [end]
    if start is not None:
        query += " AND logged_at >= ?"
        params.append(start)
    if activity_id is not None:
        query += " AND activity_id = ?"
        params.append(activity_id)
    query += " ORDER BY logged_at, id"
    return [(from_db_timestamp(r["logged_at"]), r["minutes"]) for r in conn.execute(query, params)]


def score_rows(
    conn: sqlite3.Connection,
    test_type: str | None = None,
    subject: str | None = None,
    newest_first: bool = False,
    limit: int | None = None,
) -> list[dict]:
    """Test scores filtered by type and subject, ordered by test date."""
    query = "SELECT * FROM test_scores"
    conditions = []
    params: list = []
    if test_type is not None:
        conditions.append("test_type = ?")
        params.append(test_type)
    if subject is not None:
        conditions.append("subject = ?")
        params.append(subject)
    if conditions:
        query += " WHERE " + " AND ".join(conditions)
    query += " ORDER BY date DESC, id DESC" if newest_first else " ORDER BY date, id"
    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)
    return [dict(r) for r in conn.execute(query, params)]


def score_type_counts(conn: sqlite3.Connection) -> dict[str, int]:
    rows = conn.execute("SELECT test_type, COUNT(*) AS cnt FROM test_scores GROUP BY test_type")
    return {r["test_type"]: r["cnt"] for r in rows}
