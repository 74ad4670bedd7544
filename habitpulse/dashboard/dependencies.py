"""FastAPI dependencies."""

from functools import lru_cache

from habitpulse.analytics.engine import AnalyticsEngine


@lru_cache(maxsize=1)
def get_engine() -> AnalyticsEngine:
    """One engine per process; it holds no connection, only config."""
    return AnalyticsEngine()
