"""Tests for habitpulse/logging_config.py"""

import json
import logging
from datetime import date, datetime, timezone

import pytest

from habitpulse.logging_config import get_logger, render_temporal_values, setup_logging


@pytest.fixture
def restore_logging():
    yield
    setup_logging(level="INFO", json_output=False, log_file="")


class TestRenderTemporalValues:
    def test_dates_instants_and_zones(self):
        event = {
            "event": "window_built",
            "first_day": date(2026, 3, 4),
            "now": datetime(2026, 3, 4, 21, 0, tzinfo=timezone.utc),
            "tz": timezone.utc,
            "days": 7,
        }

        rendered = render_temporal_values(None, "info", event)

        assert rendered == {
            "event": "window_built",
            "first_day": "2026-03-04",
            "now": "2026-03-04T21:00:00+00:00",
            "tz": "UTC",
            "days": 7,
        }


class TestSetupLogging:
    def test_log_file_gets_json_lines(self, tmp_path, restore_logging):
        log_file = tmp_path / "logs" / "habitpulse.log"
        setup_logging(level="INFO", json_output=False, log_file=str(log_file))

        get_logger("habitpulse.tests.file").info("window_built", first_day=date(2026, 3, 4))
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "window_built"
        assert record["first_day"] == "2026-03-04"
        assert record["level"] == "info"

    def test_level_from_argument(self, restore_logging):
        setup_logging(level="WARNING", log_file="")
        assert logging.getLogger().level == logging.WARNING

    def test_access_log_quiet_unless_debugging(self, restore_logging):
        setup_logging(level="INFO", log_file="")
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

        setup_logging(level="DEBUG", log_file="")
        assert logging.getLogger("uvicorn.access").level == logging.DEBUG

    def test_repeated_setup_keeps_one_console_handler(self, restore_logging):
        setup_logging(log_file="")
        setup_logging(log_file="")
        assert len(logging.getLogger().handlers) == 1
