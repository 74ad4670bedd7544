"""Health endpoint."""

from fastapi import APIRouter, Depends

from habitpulse import __version__
from habitpulse.analytics.engine import AnalyticsEngine
from habitpulse.dashboard.dependencies import get_engine
from habitpulse.dashboard.models import HealthCheck

router = APIRouter()


@router.get("/health", response_model=HealthCheck)
async def health_check(engine: AnalyticsEngine = Depends(get_engine)):
    return HealthCheck(status="ok", version=__version__, timezone=str(engine.tz))
