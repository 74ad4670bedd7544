"""
Tool: Summaries
Purpose: Daily summary, weekly review, and a plain-text insight digest

The daily summary is what a scheduled notifier shows at the end of the
day. The digest is a compact text block meant as the body of a prompt
for a text-generation service; nothing here calls one.
"""

import sqlite3
from collections import defaultdict
from datetime import datetime
from typing import Any

from habitpulse.store import queries

from .energy_curve import peak_hour
from .models import (
    ActivityMinutes,
    BrainLoad,
    BurnoutRisk,
    DailySummary,
    EnergyCurvePoint,
    MomentumScore,
    TopicShare,
    WeeklyReview,
)
from .streak import current_streak
from .windows import day_window, round_half_up, trailing_window

TOP_ACTIVITIES_IN_MESSAGE = 3


def compose_daily_message(
    today_minutes: int, by_activity: list[ActivityMinutes], streak: int
) -> tuple[str, str]:
    """Notification headline and body for the end-of-day summary."""
    headline = f"Daily Summary: {today_minutes} minutes today"
    if today_minutes <= 0:
        return headline, "No activities logged today. Start tracking to build your streak!"

    top = ", ".join(f"{a.name}: {a.minutes}m" for a in by_activity[:TOP_ACTIVITIES_IN_MESSAGE])
    return headline, f"Top activities: {top}. {streak}-day streak!"


def compute_daily_summary(
    conn: sqlite3.Connection, now: datetime, history_days: int = 365
) -> DailySummary:
    today = day_window(now.date(), now.tzinfo)
    week = trailing_window(now, 7)
    month = trailing_window(now, 30)

    per_activity: dict[tuple[int, str], int] = defaultdict(int)
    for session in queries.sessions_between(conn, today.start_text, today.end_text):
        per_activity[(session.activity_id, session.activity_name)] += session.minutes

    by_activity = [
        ActivityMinutes(activity_id=activity_id, name=name, minutes=minutes)
        for (activity_id, name), minutes in sorted(
            per_activity.items(), key=lambda item: (-item[1], item[0][1])
        )
    ]
    today_minutes = sum(a.minutes for a in by_activity)
    streak = current_streak(conn, now, history_days=history_days)
    headline, message = compose_daily_message(today_minutes, by_activity, streak)

    return DailySummary(
        date=now.date(),
        today_minutes=today_minutes,
        week_minutes=queries.minutes_between(conn, week.start_text, week.end_text),
        month_minutes=queries.minutes_between(conn, month.start_text, month.end_text),
        current_streak=streak,
        today_by_activity=by_activity,
        headline=headline,
        message=message,
    )


def compute_weekly_review(
    conn: sqlite3.Connection, now: datetime, deep_session_minutes: int = 45
) -> WeeklyReview:
    week = trailing_window(now, 7)
    sessions = queries.sessions_between(conn, week.start_text, week.end_text)
    deep = [s.minutes for s in sessions if s.minutes >= deep_session_minutes]
    avg_mood, avg_energy = queries.diary_averages(conn, week.first_day, week.last_day)

    return WeeklyReview(
        first_day=week.first_day,
        last_day=week.last_day,
        deep_work_minutes=sum(deep),
        deep_work_sessions=len(deep),
        total_minutes=sum(s.minutes for s in sessions),
        avg_mood=round_half_up(avg_mood, 1) if avg_mood is not None else 0,
        avg_energy=round_half_up(avg_energy, 1) if avg_energy is not None else 0,
    )


def format_insight_digest(
    momentum: MomentumScore,
    burnout: BurnoutRisk,
    brain_load: BrainLoad,
    energy_curve: list[EnergyCurvePoint],
    topics: list[TopicShare],
) -> str:
    """Plain-text digest of the current metrics."""
    lines = [
        f"Momentum: {momentum.score}/100 ({momentum.trend})",
        (
            f"  streak {momentum.streak_component:.0f}, volume {momentum.volume_component:.0f}, "
            f"consistency {momentum.consistency_component:.0f}, "
            f"deep work {momentum.deep_work_component:.0f}"
        ),
        f"Burnout risk: {burnout.risk_score}/100 ({burnout.risk_level})",
    ]
    if burnout.factors:
        lines.append(f"  factors: {', '.join(burnout.factors)}")
    lines.append(f"Brain load today: {brain_load.current_load}% ({brain_load.status})")

    best = peak_hour(energy_curve)
    if best is None:
        lines.append("Energy curve: no rated sessions yet")
    else:
        point = energy_curve[best]
        lines.append(
            f"Peak hour: {best:02d}:00 (focus {point.avg_focus}, energy {point.avg_energy})"
        )

    if topics:
        shares = ", ".join(f"{t.topic} {t.percentage}%" for t in topics[:5])
        lines.append(f"Top topics: {shares}")
    else:
        lines.append("Top topics: none logged")

    return "\n".join(lines)


def digest_payload(
    momentum: MomentumScore,
    burnout: BurnoutRisk,
    brain_load: BrainLoad,
    energy_curve: list[EnergyCurvePoint],
    topics: list[TopicShare],
) -> dict[str, Any]:
    return {
        "text": format_insight_digest(momentum, burnout, brain_load, energy_curve, topics),
        "momentum": momentum.to_dict(),
        "burnout": burnout.to_dict(),
        "brain_load": brain_load.to_dict(),
        "peak_hour": peak_hour(energy_curve),
        "topics": [t.to_dict() for t in topics],
    }
