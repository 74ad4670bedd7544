"""HabitPulse Test Suite

This package contains all tests for the HabitPulse analytics engine.

Test organization:
- unit/: Unit tests for individual modules
  - analytics/: Metric components, windows, config, summaries, series, scores
  - store/: Record store validation and read snapshots
  - test_cli.py: Command line interface
  - test_logging_config.py: structlog setup and handlers
- integration/: Read API endpoints through FastAPI's TestClient, and
  app startup in a fresh interpreter

Running tests:
    # All tests
    pytest

    # Specific module
    pytest tests/unit/analytics/

    # Skip the HTTP layer
    pytest tests/unit
"""
