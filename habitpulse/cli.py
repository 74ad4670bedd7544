#!/usr/bin/env python3
"""
HabitPulse Command Line Interface

Main entry point for the `habitpulse` command.

Usage:
    habitpulse init                          # Create schema, seed default activities
    habitpulse log Gym 45 --focus 4          # Record a session (name or id)
    habitpulse report momentum               # Print a metric as JSON
    habitpulse report topics --days 14
    habitpulse report adherence --date 2026-03-02
    habitpulse report chart --range monthly
    habitpulse score prelims History 72 100  # Record a test result
    habitpulse serve --port 8080             # Start the read API
    habitpulse --version                     # Show version
"""

import argparse
import json
import sys
from datetime import date, datetime

from dotenv import find_dotenv, load_dotenv

from habitpulse.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _fail(message: str) -> int:
    _print_json({"success": False, "error": message})
    return 1


def _resolve_activity(ref: str) -> dict | None:
    """Find an activity by numeric id or by exact name (case-insensitive)."""
    from habitpulse.store.records import get_activity, list_activities

    if ref.isdigit():
        return get_activity(int(ref))
    for activity in list_activities(include_archived=True):
        if activity["name"].lower() == ref.lower():
            return activity
    return None


def cmd_init(args):
    """Handle init subcommand."""
    from habitpulse.store.records import init_db

    result = init_db(seed=not args.no_seed)
    _print_json(result)


def cmd_log(args):
    """Handle log subcommand."""
    from habitpulse.store.records import log_session

    activity = _resolve_activity(args.activity)
    if activity is None:
        return _fail(f"Activity '{args.activity}' not found")

    # Naive --at values are wall-clock time on this machine
    logged_at = args.at.astimezone() if args.at else None

    result = log_session(
        activity["id"],
        args.minutes,
        focus_rating=args.focus,
        energy_after=args.energy,
        distractions=args.distractions,
        notes=args.notes,
        source=args.source,
        logged_at=logged_at,
    )
    _print_json(result)
    return 0 if result["success"] else 1


def cmd_score(args):
    """Handle score subcommand."""
    from habitpulse.store.records import record_test_score

    result = record_test_score(
        args.test_type,
        args.subject,
        args.marks,
        args.total,
        test_date=args.date,
        topic=args.topic,
        duration_minutes=args.duration,
        notes=args.notes,
    )
    _print_json(result)
    return 0 if result["success"] else 1


REPORTS = (
    "streak",
    "adherence",
    "weekly-adherence",
    "momentum",
    "burnout",
    "brain-load",
    "energy-curve",
    "topics",
    "activity-stats",
    "deep-work",
    "diary",
    "daily-summary",
    "weekly-review",
    "digest",
    "chart",
    "heatmap",
    "test-trends",
    "test-summary",
)


def build_report(engine, args):
    """Run one engine metric and return a JSON-ready value."""
    now = args.at
    metric = args.metric

    activity_id = None
    if args.activity:
        activity = _resolve_activity(args.activity)
        if activity is None:
            raise LookupError(f"Activity '{args.activity}' not found")
        activity_id = activity["id"]

    if metric == "streak":
        return {
            "current_streak": engine.get_streak(now=now, activity_id=activity_id),
            "activity_id": activity_id,
        }
    if metric == "adherence":
        return engine.get_adherence(args.date, now=now).to_dict()
    if metric == "weekly-adherence":
        return [d.to_dict() for d in engine.get_weekly_adherence(now=now)]
    if metric == "momentum":
        return engine.get_momentum(now=now).to_dict()
    if metric == "burnout":
        return engine.get_burnout_risk(now=now).to_dict()
    if metric == "brain-load":
        return engine.get_brain_load(now=now).to_dict()
    if metric == "energy-curve":
        return [p.to_dict() for p in engine.get_energy_curve(now=now)]
    if metric == "topics":
        return [t.to_dict() for t in engine.get_topic_distribution(days=args.days, now=now)]
    if metric == "activity-stats":
        if activity_id is None:
            raise ValueError("activity-stats requires --activity")
        return engine.get_activity_stats(activity_id, now=now).to_dict()
    if metric == "deep-work":
        return engine.get_deep_work_stats(now=now).to_dict()
    if metric == "diary":
        return engine.get_diary_stats(now=now).to_dict()
    if metric == "daily-summary":
        return engine.get_daily_summary(now=now).to_dict()
    if metric == "weekly-review":
        return engine.get_weekly_review(now=now).to_dict()
    if metric == "chart":
        return engine.get_chart(args.range, activity_id=activity_id, now=now).to_dict()
    if metric == "heatmap":
        return engine.get_heatmap(activity_id=activity_id, days=args.days, now=now)
    if metric == "test-trends":
        return [p.to_dict() for p in engine.get_score_trends(args.type, args.subject)]
    if metric == "test-summary":
        return engine.get_score_summary(args.type).to_dict()
    return engine.get_insight_digest(now=now)


def cmd_report(args):
    """Handle report subcommand."""
    from habitpulse.analytics.engine import AnalyticsEngine

    try:
        engine = AnalyticsEngine(tz=args.tz)
        payload = build_report(engine, args)
    except (ValueError, LookupError) as e:
        logger.warning("report_failed", metric=args.metric, error=str(e))
        return _fail(str(e))

    if args.metric == "digest" and args.text:
        print(payload["text"])
    else:
        _print_json(payload)
    return 0


def cmd_serve(args):
    """Handle serve subcommand."""
    import uvicorn

    print(f"Starting HabitPulse API at http://{args.host}:{args.port}/api")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "habitpulse.dashboard.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


def cmd_version(args):
    """Show version information."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        v = version("habitpulse")
    except PackageNotFoundError:
        from habitpulse import __version__

        v = f"{__version__} (development)"

    print(f"HabitPulse version {v}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="habitpulse",
        description="HabitPulse - behavioral analytics over your activity log",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version and exit"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Init subcommand
    init_parser = subparsers.add_parser("init", help="Create the database schema")
    init_parser.add_argument(
        "--no-seed", action="store_true", help="Do not create the default activities"
    )
    init_parser.set_defaults(func=cmd_init)

    # Log subcommand
    log_parser = subparsers.add_parser("log", help="Record a session")
    log_parser.add_argument("activity", help="Activity id or name")
    log_parser.add_argument("minutes", type=int, help="Duration in minutes")
    log_parser.add_argument("--focus", type=int, help="Focus rating 1-5")
    log_parser.add_argument("--energy", type=int, help="Energy after the session, 1-5")
    log_parser.add_argument("--distractions", help="What got in the way")
    log_parser.add_argument("--notes", help="Free-text notes")
    log_parser.add_argument(
        "--source", default="manual", choices=["manual", "timer", "bot"], help="Entry source"
    )
    log_parser.add_argument(
        "--at", type=datetime.fromisoformat, help="When it happened (ISO 8601, default now)"
    )
    log_parser.set_defaults(func=cmd_log)

    # Report subcommand
    report_parser = subparsers.add_parser("report", help="Print a metric as JSON")
    report_parser.add_argument("metric", choices=REPORTS, help="Metric to compute")
    report_parser.add_argument(
        "--date", type=date.fromisoformat, help="Day for adherence (YYYY-MM-DD)"
    )
    report_parser.add_argument(
        "--days", type=int, help="Window for topics (default 30) or heatmap (default 365)"
    )
    report_parser.add_argument("--activity", help="Activity id or name")
    report_parser.add_argument(
        "--at", type=datetime.fromisoformat, help="Evaluate as of this instant (ISO 8601)"
    )
    report_parser.add_argument(
        "--range", default="weekly", help="Chart range: daily, weekly, monthly, or all"
    )
    report_parser.add_argument("--type", help="Test type for test reports: prelims or mains")
    report_parser.add_argument("--subject", help="Subject filter for test-trends")
    report_parser.add_argument("--tz", help="Timezone override (IANA name, UTC, or local)")
    report_parser.add_argument(
        "--text", action="store_true", help="Print the digest as plain text"
    )
    report_parser.set_defaults(func=cmd_report)

    # Score subcommand
    score_parser = subparsers.add_parser("score", help="Record a practice test result")
    score_parser.add_argument("test_type", choices=["prelims", "mains"], help="Test series")
    score_parser.add_argument("subject", help="Subject the paper covered")
    score_parser.add_argument("marks", type=float, help="Marks obtained")
    score_parser.add_argument("total", type=float, help="Paper total")
    score_parser.add_argument(
        "--date", type=date.fromisoformat, help="Test date (YYYY-MM-DD, default today)"
    )
    score_parser.add_argument("--topic", help="Topic within the subject")
    score_parser.add_argument("--duration", type=int, help="Minutes taken")
    score_parser.add_argument("--notes", help="Free-text notes")
    score_parser.set_defaults(func=cmd_score)

    # Serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start the read API server")
    serve_parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)"
    )
    serve_parser.add_argument(
        "--port", type=int, default=8080, help="Port to bind to (default: 8080)"
    )
    serve_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        cmd_version(args)
        return

    if not args.command:
        parser.print_help()
        return

    load_dotenv(find_dotenv(usecwd=True))
    setup_logging()

    result = args.func(args)

    # Commands may return an exit code
    if isinstance(result, int) and result != 0:
        sys.exit(result)


if __name__ == "__main__":
    main()
