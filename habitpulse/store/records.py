"""
Tool: Record Store
Purpose: Schema, connections, and validated writes for the activity log

Everything the analytics engine reads is written here. Invariants are
enforced at write time (positive minutes, 1-5 ratings, same-day
timetable slots, one diary entry per date, marks within the paper total)
so the read side never has to second-guess a row.

Usage:
    from habitpulse.store.records import create_activity, log_session

    result = create_activity(name="Deep Code", category="Work")
    log_session(result["data"]["activity_id"], minutes=50, focus_rating=4)

Dependencies:
    - sqlite3 (stdlib)

Output:
    Write functions return {"success": True, "data": {...}} or
    {"success": False, "error": "..."}
"""

import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterator

from habitpulse.analytics.windows import parse_hhmm, round_half_up, to_db_timestamp
from habitpulse.logging_config import get_logger

from . import DB_PATH, DEFAULT_ACTIVITIES, RATING_RANGE, SESSION_SOURCES, TEST_TYPES

logger = get_logger(__name__)


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Get database connection, creating tables if needed."""
    path = Path(db_path) if db_path else DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS activities (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT UNIQUE NOT NULL,
            category TEXT NOT NULL DEFAULT 'other',
            icon TEXT DEFAULT '📌',
            color TEXT DEFAULT '#6C63FF',
            daily_target_minutes INTEGER DEFAULT 0,
            is_archived INTEGER DEFAULT 0,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS activity_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            activity_id INTEGER NOT NULL REFERENCES activities(id) ON DELETE CASCADE,
            minutes INTEGER NOT NULL CHECK(minutes > 0),
            notes TEXT,
            source TEXT DEFAULT 'manual' CHECK(source IN ('manual', 'timer', 'bot')),
            focus_rating INTEGER CHECK(focus_rating >= 1 AND focus_rating <= 5),
            distractions TEXT,
            energy_after INTEGER CHECK(energy_after >= 1 AND energy_after <= 5),
            logged_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS timetable_slots (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            day_of_week INTEGER NOT NULL CHECK(day_of_week >= 0 AND day_of_week <= 6),
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            activity_id INTEGER NOT NULL REFERENCES activities(id) ON DELETE CASCADE,
            label TEXT,
            is_active INTEGER DEFAULT 1,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS diary_entries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            date TEXT UNIQUE NOT NULL,
            mood INTEGER CHECK(mood >= 1 AND mood <= 5),
            energy_level INTEGER CHECK(energy_level >= 1 AND energy_level <= 5),
            content TEXT,
            tags TEXT,
            wins TEXT,
            challenges TEXT,
            tomorrow_plan TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS test_scores (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            test_type TEXT NOT NULL CHECK(test_type IN ('prelims', 'mains')),
            subject TEXT NOT NULL,
            topic TEXT,
            marks_obtained REAL NOT NULL CHECK(marks_obtained >= 0),
            total_marks REAL NOT NULL CHECK(total_marks > 0),
            percentage REAL NOT NULL,
            date TEXT NOT NULL,
            duration_minutes INTEGER,
            notes TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # Indexes
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_logs_activity ON activity_logs(activity_id)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_logs_date ON activity_logs(logged_at)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_timetable_day ON timetable_slots(day_of_week)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_diary_date ON diary_entries(date)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_test_type ON test_scores(test_type)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_test_date ON test_scores(date)")

    conn.commit()
    return conn


@contextmanager
def read_snapshot(db_path: str | Path | None = None) -> Iterator[sqlite3.Connection]:
    """
    Yield a connection holding one read transaction.

    Every query issued inside the block sees the same database state, so
    a session logged mid-computation cannot leave a result half-updated.
    """
    conn = get_connection(db_path)
    try:
        conn.execute("BEGIN")
        yield conn
    finally:
        if conn.in_transaction:
            conn.rollback()
        conn.close()


def init_db(db_path: str | Path | None = None, seed: bool = True) -> dict[str, Any]:
    """Create the schema and, optionally, the default activities."""
    conn = get_connection(db_path)
    conn.close()
    seeded = seed_default_activities(db_path) if seed else 0
    path = Path(db_path) if db_path else DB_PATH
    return {"success": True, "data": {"db_path": str(path), "seeded_activities": seeded}}


def seed_default_activities(db_path: str | Path | None = None) -> int:
    """Insert the starter activities that are not already present."""
    conn = get_connection(db_path)
    try:
        before = conn.total_changes
        conn.executemany(
            "INSERT OR IGNORE INTO activities (name, category, icon, color) VALUES (?, ?, ?, ?)",
            [(a["name"], a["category"], a["icon"], a["color"]) for a in DEFAULT_ACTIVITIES],
        )
        conn.commit()
        return conn.total_changes - before
    finally:
        conn.close()


def row_to_dict(row) -> dict | None:
    """Convert sqlite3.Row to dictionary."""
    if row is None:
        return None
    return dict(row)


def _reject(message: str, **context) -> dict[str, Any]:
    logger.warning("record_rejected", error=message, **context)
    return {"success": False, "error": message}


def _check_rating(name: str, value: int | None) -> str | None:
    if value is None:
        return None
    low, high = RATING_RANGE
    if not isinstance(value, int) or isinstance(value, bool) or not low <= value <= high:
        return f"{name} must be an integer between {low} and {high}, got {value!r}"
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Activities
# ─────────────────────────────────────────────────────────────────────────────


def create_activity(
    name: str,
    category: str = "other",
    icon: str = "📌",
    color: str = "#6C63FF",
    daily_target_minutes: int = 0,
    db_path: str | Path | None = None,
) -> dict[str, Any]:
    """
    Create an activity definition.

    Args:
        name: Display name, unique across activities
        category: Free-form category tag (used for brain-load weighting)
        icon: Display icon
        color: Display color
        daily_target_minutes: Optional daily goal

    Returns:
        dict with success status and the new activity
    """
    name = (name or "").strip()
    if not name:
        return _reject("Activity name is required")
    if daily_target_minutes < 0:
        return _reject("Daily target must be non-negative", name=name)

    conn = get_connection(db_path)
    try:
        cursor = conn.execute(
            """
            INSERT INTO activities (name, category, icon, color, daily_target_minutes)
            VALUES (?, ?, ?, ?, ?)
        """,
            (name, category or "other", icon, color, daily_target_minutes),
        )
        conn.commit()
        activity_id = cursor.lastrowid
        row = conn.execute("SELECT * FROM activities WHERE id = ?", (activity_id,)).fetchone()
    except sqlite3.IntegrityError:
        return _reject(f"Activity '{name}' already exists", name=name)
    finally:
        conn.close()

    return {"success": True, "data": {"activity_id": activity_id, "activity": row_to_dict(row)}}


def update_activity(
    activity_id: int, db_path: str | Path | None = None, **fields: Any
) -> dict[str, Any]:
    """Update name, category, icon, color or daily target of an activity."""
    allowed = {"name", "category", "icon", "color", "daily_target_minutes"}
    unknown = set(fields) - allowed
    if unknown:
        return _reject(f"Unknown activity fields: {', '.join(sorted(unknown))}")
    if not fields:
        return _reject("No fields to update")

    assignments = ", ".join(f"{key} = ?" for key in fields)
    conn = get_connection(db_path)
    try:
        cursor = conn.execute(
            f"UPDATE activities SET {assignments} WHERE id = ?",
            (*fields.values(), activity_id),
        )
        conn.commit()
    except sqlite3.IntegrityError as e:
        return _reject(f"Update rejected: {e}", activity_id=activity_id)
    finally:
        conn.close()

    if cursor.rowcount == 0:
        return _reject(f"Activity {activity_id} not found")
    return {"success": True, "data": {"activity_id": activity_id, "updated": sorted(fields)}}


def archive_activity(
    activity_id: int, archived: bool = True, db_path: str | Path | None = None
) -> dict[str, Any]:
    """Archive (or restore) an activity. Its history stays intact."""
    conn = get_connection(db_path)
    try:
        cursor = conn.execute(
            "UPDATE activities SET is_archived = ? WHERE id = ?", (int(archived), activity_id)
        )
        conn.commit()
    finally:
        conn.close()

    if cursor.rowcount == 0:
        return _reject(f"Activity {activity_id} not found")
    return {"success": True, "data": {"activity_id": activity_id, "archived": archived}}


def delete_activity(activity_id: int, db_path: str | Path | None = None) -> dict[str, Any]:
    """Delete an activity together with its sessions and timetable slots."""
    conn = get_connection(db_path)
    try:
        sessions = conn.execute(
            "DELETE FROM activity_logs WHERE activity_id = ?", (activity_id,)
        ).rowcount
        slots = conn.execute(
            "DELETE FROM timetable_slots WHERE activity_id = ?", (activity_id,)
        ).rowcount
        deleted = conn.execute("DELETE FROM activities WHERE id = ?", (activity_id,)).rowcount
        if deleted == 0:
            conn.rollback()
            return _reject(f"Activity {activity_id} not found")
        conn.commit()
    finally:
        conn.close()

    logger.info("activity_deleted", activity_id=activity_id, sessions=sessions, slots=slots)
    return {
        "success": True,
        "data": {"activity_id": activity_id, "sessions_deleted": sessions, "slots_deleted": slots},
    }


def get_activity(activity_id: int, db_path: str | Path | None = None) -> dict | None:
    conn = get_connection(db_path)
    try:
        row = conn.execute("SELECT * FROM activities WHERE id = ?", (activity_id,)).fetchone()
    finally:
        conn.close()
    return row_to_dict(row)


def list_activities(
    include_archived: bool = False, db_path: str | Path | None = None
) -> list[dict]:
    query = "SELECT * FROM activities"
    if not include_archived:
        query += " WHERE is_archived = 0"
    query += " ORDER BY name"

    conn = get_connection(db_path)
    try:
        rows = conn.execute(query).fetchall()
    finally:
        conn.close()
    return [row_to_dict(r) for r in rows]


# ─────────────────────────────────────────────────────────────────────────────
# Sessions
# ─────────────────────────────────────────────────────────────────────────────


def log_session(
    activity_id: int,
    minutes: int,
    focus_rating: int | None = None,
    energy_after: int | None = None,
    distractions: str | None = None,
    notes: str | None = None,
    source: str = "manual",
    logged_at: datetime | None = None,
    db_path: str | Path | None = None,
) -> dict[str, Any]:
    """
    Record a session of time spent on an activity.

    Args:
        activity_id: Activity the time was spent on
        minutes: Duration in minutes, must be positive
        focus_rating: Optional 1-5 focus self-rating
        energy_after: Optional 1-5 energy rating after the session
        distractions: Optional free-text distraction note
        notes: Optional free text
        source: manual, timer, or bot
        logged_at: Instant of logging (defaults to now; naive means UTC)

    Returns:
        dict with success status and the session id
    """
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        return _reject(f"Minutes must be a positive integer, got {minutes!r}")
    for name, value in (("focus_rating", focus_rating), ("energy_after", energy_after)):
        problem = _check_rating(name, value)
        if problem:
            return _reject(problem)
    if source not in SESSION_SOURCES:
        return _reject(f"Invalid source '{source}'. Must be one of: {', '.join(SESSION_SOURCES)}")

    timestamp = to_db_timestamp(logged_at or datetime.now().astimezone())

    conn = get_connection(db_path)
    try:
        exists = conn.execute("SELECT 1 FROM activities WHERE id = ?", (activity_id,)).fetchone()
        if not exists:
            return _reject(f"Activity {activity_id} not found")

        cursor = conn.execute(
            """
            INSERT INTO activity_logs
            (activity_id, minutes, notes, source, focus_rating, distractions,
             energy_after, logged_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                activity_id,
                minutes,
                notes or None,
                source,
                focus_rating,
                distractions or None,
                energy_after,
                timestamp,
            ),
        )
        conn.commit()
        session_id = cursor.lastrowid
    finally:
        conn.close()

    logger.debug("session_logged", session_id=session_id, activity_id=activity_id, minutes=minutes)
    return {"success": True, "data": {"session_id": session_id, "logged_at": timestamp}}


def delete_session(session_id: int, db_path: str | Path | None = None) -> dict[str, Any]:
    conn = get_connection(db_path)
    try:
        deleted = conn.execute("DELETE FROM activity_logs WHERE id = ?", (session_id,)).rowcount
        conn.commit()
    finally:
        conn.close()

    if deleted == 0:
        return _reject(f"Session {session_id} not found")
    return {"success": True, "data": {"session_id": session_id}}


def list_sessions(
    activity_id: int | None = None, limit: int = 100, db_path: str | Path | None = None
) -> list[dict]:
    """Most recent sessions first, joined with activity name. At most 500 rows."""
    query = """
        SELECT l.*, a.name AS activity_name, a.icon AS activity_icon, a.color AS activity_color
        FROM activity_logs l JOIN activities a ON l.activity_id = a.id
    """
    params: list[Any] = []
    if activity_id is not None:
        query += " WHERE l.activity_id = ?"
        params.append(activity_id)
    query += " ORDER BY l.logged_at DESC, l.id DESC LIMIT ?"
    params.append(max(1, min(limit, 500)))

    conn = get_connection(db_path)
    try:
        rows = conn.execute(query, params).fetchall()
    finally:
        conn.close()
    return [row_to_dict(r) for r in rows]


# ─────────────────────────────────────────────────────────────────────────────
# Timetable
# ─────────────────────────────────────────────────────────────────────────────


def upsert_slot(
    day_of_week: int,
    start_time: str,
    end_time: str,
    activity_id: int,
    label: str | None = None,
    slot_id: int | None = None,
    db_path: str | Path | None = None,
) -> dict[str, Any]:
    """
    Create or update a recurring weekly timetable slot.

    Args:
        day_of_week: 0 = Sunday ... 6 = Saturday
        start_time: "HH:MM"
        end_time: "HH:MM", later than start_time on the same day
        activity_id: Activity the slot is planned for
        label: Optional label
        slot_id: Existing slot to update (creates a new slot when omitted)

    Returns:
        dict with success status and the slot id
    """
    if not isinstance(day_of_week, int) or not 0 <= day_of_week <= 6:
        return _reject(f"day_of_week must be 0-6 (0 = Sunday), got {day_of_week!r}")
    try:
        start = parse_hhmm(start_time)
        end = parse_hhmm(end_time)
    except ValueError as e:
        return _reject(str(e))
    if end <= start:
        return _reject(f"Slot must end after it starts ({start_time}-{end_time})")

    conn = get_connection(db_path)
    try:
        exists = conn.execute("SELECT 1 FROM activities WHERE id = ?", (activity_id,)).fetchone()
        if not exists:
            return _reject(f"Activity {activity_id} not found")

        if slot_id is not None:
            cursor = conn.execute(
                """
                UPDATE timetable_slots
                SET day_of_week = ?, start_time = ?, end_time = ?, activity_id = ?, label = ?
                WHERE id = ?
            """,
                (day_of_week, start_time, end_time, activity_id, label or None, slot_id),
            )
            if cursor.rowcount == 0:
                return _reject(f"Slot {slot_id} not found")
        else:
            cursor = conn.execute(
                """
                INSERT INTO timetable_slots (day_of_week, start_time, end_time, activity_id, label)
                VALUES (?, ?, ?, ?, ?)
            """,
                (day_of_week, start_time, end_time, activity_id, label or None),
            )
            slot_id = cursor.lastrowid
        conn.commit()
    finally:
        conn.close()

    return {"success": True, "data": {"slot_id": slot_id, "planned_minutes": end - start}}


def set_slot_active(
    slot_id: int, active: bool, db_path: str | Path | None = None
) -> dict[str, Any]:
    conn = get_connection(db_path)
    try:
        cursor = conn.execute(
            "UPDATE timetable_slots SET is_active = ? WHERE id = ?", (int(active), slot_id)
        )
        conn.commit()
    finally:
        conn.close()

    if cursor.rowcount == 0:
        return _reject(f"Slot {slot_id} not found")
    return {"success": True, "data": {"slot_id": slot_id, "active": active}}


def delete_slot(slot_id: int, db_path: str | Path | None = None) -> dict[str, Any]:
    conn = get_connection(db_path)
    try:
        deleted = conn.execute("DELETE FROM timetable_slots WHERE id = ?", (slot_id,)).rowcount
        conn.commit()
    finally:
        conn.close()

    if deleted == 0:
        return _reject(f"Slot {slot_id} not found")
    return {"success": True, "data": {"slot_id": slot_id}}


# ─────────────────────────────────────────────────────────────────────────────
# Diary
# ─────────────────────────────────────────────────────────────────────────────


def upsert_diary_entry(
    entry_date: date | str,
    mood: int | None = None,
    energy_level: int | None = None,
    content: str | None = None,
    tags: str | None = None,
    wins: str | None = None,
    challenges: str | None = None,
    tomorrow_plan: str | None = None,
    db_path: str | Path | None = None,
) -> dict[str, Any]:
    """
    Create or replace the diary entry for a calendar date.

    Args:
        entry_date: Calendar date (date or "YYYY-MM-DD")
        mood: Optional 1-5 mood
        energy_level: Optional 1-5 energy

    Returns:
        dict with success status and the entry id
    """
    try:
        day = entry_date if isinstance(entry_date, date) else date.fromisoformat(entry_date)
    except (TypeError, ValueError):
        return _reject(f"Invalid diary date {entry_date!r}, expected YYYY-MM-DD")
    for name, value in (("mood", mood), ("energy_level", energy_level)):
        problem = _check_rating(name, value)
        if problem:
            return _reject(problem)

    values = (mood, energy_level, content, tags, wins, challenges, tomorrow_plan)
    conn = get_connection(db_path)
    try:
        existing = conn.execute(
            "SELECT id FROM diary_entries WHERE date = ?", (day.isoformat(),)
        ).fetchone()
        if existing:
            conn.execute(
                """
                UPDATE diary_entries
                SET mood = ?, energy_level = ?, content = ?, tags = ?, wins = ?,
                    challenges = ?, tomorrow_plan = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
            """,
                (*values, existing["id"]),
            )
            entry_id = existing["id"]
        else:
            cursor = conn.execute(
                """
                INSERT INTO diary_entries
                (date, mood, energy_level, content, tags, wins, challenges, tomorrow_plan)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (day.isoformat(), *values),
            )
            entry_id = cursor.lastrowid
        conn.commit()
    finally:
        conn.close()

    return {"success": True, "data": {"entry_id": entry_id, "date": day.isoformat()}}


def get_diary_entry(entry_date: date | str, db_path: str | Path | None = None) -> dict | None:
    key = entry_date.isoformat() if isinstance(entry_date, date) else entry_date
    conn = get_connection(db_path)
    try:
        row = conn.execute("SELECT * FROM diary_entries WHERE date = ?", (key,)).fetchone()
    finally:
        conn.close()
    return row_to_dict(row)


# ─────────────────────────────────────────────────────────────────────────────
# Test Scores
# ─────────────────────────────────────────────────────────────────────────────


def record_test_score(
    test_type: str,
    subject: str,
    marks_obtained: float,
    total_marks: float,
    test_date: date | str | None = None,
    topic: str | None = None,
    duration_minutes: int | None = None,
    notes: str | None = None,
    db_path: str | Path | None = None,
) -> dict[str, Any]:
    """
    Record the result of a practice test.

    Args:
        test_type: prelims or mains
        subject: Subject the paper covered
        marks_obtained: Marks scored, between 0 and total_marks
        total_marks: Paper total, must be positive
        test_date: Calendar date of the test (defaults to today)
        topic: Optional topic within the subject
        duration_minutes: Optional time taken
        notes: Optional free text

    Returns:
        dict with success status, the score id and the stored percentage
    """
    if test_type not in TEST_TYPES:
        return _reject(f"Invalid test type '{test_type}'. Must be one of: {', '.join(TEST_TYPES)}")
    subject = (subject or "").strip()
    if not subject:
        return _reject("Subject is required")
    if total_marks is None or total_marks <= 0:
        return _reject(f"Total marks must be positive, got {total_marks!r}")
    if marks_obtained is None or not 0 <= marks_obtained <= total_marks:
        return _reject(f"Marks must be between 0 and {total_marks}, got {marks_obtained!r}")
    if duration_minutes is not None and duration_minutes <= 0:
        return _reject(f"Duration must be positive, got {duration_minutes!r}")
    try:
        if test_date is None:
            day = date.today()
        elif isinstance(test_date, date):
            day = test_date
        else:
            day = date.fromisoformat(test_date)
    except (TypeError, ValueError):
        return _reject(f"Invalid test date {test_date!r}, expected YYYY-MM-DD")

    percentage = round_half_up(100 * marks_obtained / total_marks, 2)

    conn = get_connection(db_path)
    try:
        cursor = conn.execute(
            """
            INSERT INTO test_scores
            (test_type, subject, topic, marks_obtained, total_marks, percentage, date,
             duration_minutes, notes)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                test_type,
                subject,
                topic or None,
                marks_obtained,
                total_marks,
                percentage,
                day.isoformat(),
                duration_minutes,
                notes or None,
            ),
        )
        conn.commit()
        score_id = cursor.lastrowid
    finally:
        conn.close()

    logger.debug("test_score_recorded", score_id=score_id, test_type=test_type, subject=subject)
    return {"success": True, "data": {"score_id": score_id, "percentage": percentage}}


def delete_test_score(score_id: int, db_path: str | Path | None = None) -> dict[str, Any]:
    conn = get_connection(db_path)
    try:
        deleted = conn.execute("DELETE FROM test_scores WHERE id = ?", (score_id,)).rowcount
        conn.commit()
    finally:
        conn.close()

    if deleted == 0:
        return _reject(f"Test score {score_id} not found")
    return {"success": True, "data": {"score_id": score_id}}
