"""Read API Routes Package

Aggregates the route handlers into a single router that the
FastAPI application includes under /api.
"""

from fastapi import APIRouter

from .analytics import router as analytics_router
from .status import router as status_router


api_router = APIRouter(prefix="/api")

api_router.include_router(status_router, tags=["status"])
api_router.include_router(analytics_router, prefix="/analytics", tags=["analytics"])

__all__ = ["api_router"]
