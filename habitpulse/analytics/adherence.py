"""
Tool: Adherence Evaluator
Purpose: Compare a day's planned timetable slots with logged minutes

Each active slot for the weekday is judged against the minutes logged
for its activity on that calendar date:
    done     logged >= 0.8 x planned
    partial  0 < logged < 0.8 x planned
    missed   logged == 0

Two slots for the same activity on one day are each judged against the
same day total, so completed minutes can exceed what was actually
logged. Downstream numbers depend on this, so it stays.
"""

import sqlite3
from datetime import date, datetime, timedelta

from habitpulse.logging_config import get_logger
from habitpulse.store import queries

from .models import AdherenceDay, AdherenceSlot
from .windows import day_window, parse_hhmm, round_half_up, sunday_based_weekday

logger = get_logger(__name__)


def classify_slot(logged_minutes: int, planned_minutes: int, done_ratio: float = 0.8) -> str:
    """Status of one slot given the minutes logged for its activity that day."""
    if logged_minutes >= planned_minutes * done_ratio:
        return "done"
    if logged_minutes > 0:
        return "partial"
    return "missed"


def adherence_percentage(completed_minutes: int, planned_minutes: int) -> int:
    """
    round(100 x completed / planned), 0 when nothing is planned.

    100 is reserved for a fully completed plan: 199/200 reports 99.
    """
    if planned_minutes <= 0:
        return 0
    pct = round_half_up(100 * completed_minutes / planned_minutes)
    if completed_minutes < planned_minutes:
        pct = min(pct, 99)
    return max(0, min(pct, 100))


def evaluate_day(
    conn: sqlite3.Connection, day: date, tz, done_ratio: float = 0.8
) -> AdherenceDay:
    """Adherence for one local calendar date."""
    weekday = sunday_based_weekday(day)
    window = day_window(day, tz)
    logged_cache: dict[int, int] = {}

    slots = []
    for slot in queries.slots_for_weekday(conn, weekday):
        planned = parse_hhmm(slot["end_time"]) - parse_hhmm(slot["start_time"])
        activity_id = slot["activity_id"]
        if activity_id not in logged_cache:
            logged_cache[activity_id] = queries.minutes_between(
                conn, window.start_text, window.end_text, activity_id=activity_id
            )
        logged = logged_cache[activity_id]

        slots.append(
            AdherenceSlot(
                slot_id=slot["id"],
                start_time=slot["start_time"],
                end_time=slot["end_time"],
                activity_id=activity_id,
                activity_name=slot["activity_name"] or "",
                activity_icon=slot["activity_icon"] or "📌",
                label=slot["label"],
                planned_minutes=planned,
                logged_minutes=logged,
                status=classify_slot(logged, planned, done_ratio),
            )
        )

    planned_total = sum(s.planned_minutes for s in slots)
    completed_total = sum(min(s.logged_minutes, s.planned_minutes) for s in slots)

    return AdherenceDay(
        date=day,
        day_of_week=weekday,
        planned_minutes=planned_total,
        completed_minutes=completed_total,
        adherence_pct=adherence_percentage(completed_total, planned_total),
        slots=slots,
    )


def evaluate_week(
    conn: sqlite3.Connection, now: datetime, done_ratio: float = 0.8
) -> list[AdherenceDay]:
    """The trailing seven days, today inclusive, oldest first."""
    today = now.date()
    days = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
    results = [evaluate_day(conn, day, now.tzinfo, done_ratio) for day in days]
    logger.debug(
        "weekly_adherence_computed",
        first_day=days[0].isoformat(),
        percentages=[r.adherence_pct for r in results],
    )
    return results
