"""
Structured logging for HabitPulse, built on structlog over stdlib logging.

Environment:
    HABITPULSE_LOG_LEVEL   DEBUG, INFO (default), WARNING, ...
    HABITPULSE_LOG_FORMAT  "json" for one JSON object per line on stderr
    HABITPULSE_LOG_FILE    optional path; always written as JSON lines

Engine events often carry dates, instants and zones ("now", "first_day",
"tz"). Those are rendered as ISO text so JSON output stays parseable
and console output shows the local offset that was actually used.

Usage:
    from habitpulse.logging_config import get_logger, setup_logging
    setup_logging()
    logger = get_logger(__name__)
    logger.info("momentum_computed", score=72, trend="rising")
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import date, datetime, tzinfo
from pathlib import Path

import structlog

# Per-request access lines from the read API server
NOISY_LOGGERS = ("uvicorn.access",)


def render_temporal_values(logger, method_name: str, event_dict: dict) -> dict:
    """Turn date, datetime and tzinfo values into strings."""
    for key, value in event_dict.items():
        if isinstance(value, (date, datetime)):
            event_dict[key] = value.isoformat()
        elif isinstance(value, tzinfo):
            event_dict[key] = str(value)
    return event_dict


def _file_handler(path: str, foreign_pre_chain: list) -> logging.Handler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=foreign_pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
    )
    return handler


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the root logger. Safe to call more than once."""
    if level is None:
        level = os.environ.get("HABITPULSE_LOG_LEVEL", "INFO")
    if json_output is None:
        json_output = os.environ.get("HABITPULSE_LOG_FORMAT", "").lower() == "json"
    if log_file is None:
        log_file = os.environ.get("HABITPULSE_LOG_FILE") or None

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        render_temporal_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    console_renderer: structlog.types.Processor
    if json_output:
        console_renderer = structlog.processors.JSONRenderer()
    else:
        console_renderer = structlog.dev.ConsoleRenderer()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                console_renderer,
            ],
        )
    )

    root = logging.getLogger()
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.addHandler(console)
    if log_file:
        root.addHandler(_file_handler(log_file, shared_processors))
    root.setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
        )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["get_logger", "render_temporal_values", "setup_logging"]
