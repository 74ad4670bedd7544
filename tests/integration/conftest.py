"""
Integration test fixtures for HabitPulse.

Provides fixtures specific to integration testing:
- A FastAPI test client over an isolated database
- An engine pinned to the fixed test timezone
"""

from collections.abc import Generator

import pytest


# Handle optional dependencies gracefully
try:
    from fastapi.testclient import TestClient  # noqa: F401

    HAS_FASTAPI = True
except ImportError:
    HAS_FASTAPI = False


requires_fastapi = pytest.mark.skipif(not HAS_FASTAPI, reason="FastAPI not installed")


# ─────────────────────────────────────────────────────────────────────────────
# Read API Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def test_client(engine) -> Generator:
    """TestClient whose routes use the temporary-database engine."""
    if not HAS_FASTAPI:
        pytest.skip("FastAPI not installed")

    from fastapi.testclient import TestClient

    from habitpulse.dashboard.dependencies import get_engine
    from habitpulse.dashboard.main import app

    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
