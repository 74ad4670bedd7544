"""
HabitPulse Read API - FastAPI Application

Serves the analytics engine's metrics as JSON.

Usage:
    uvicorn habitpulse.dashboard.main:app --host 127.0.0.1 --port 8080 --reload

    Or via the CLI:
    habitpulse serve
"""

from contextlib import asynccontextmanager

# Load .env before the store and engine packages read their paths
from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True))

import yaml  # noqa: E402
from fastapi import FastAPI, HTTPException, Request, status  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from habitpulse import __version__  # noqa: E402
from habitpulse.dashboard import CONFIG_PATH  # noqa: E402
from habitpulse.dashboard.models import ErrorResponse  # noqa: E402
from habitpulse.dashboard.routes import api_router  # noqa: E402
from habitpulse.logging_config import get_logger, setup_logging  # noqa: E402
from habitpulse.store.records import init_db  # noqa: E402

logger = get_logger(__name__)


def load_config() -> dict:
    """Load read API configuration from YAML."""
    if CONFIG_PATH.exists():
        with open(CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


config = load_config()
dashboard_config = config.get("dashboard", {})


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("read_api_starting", version=__version__)

    # Schema only; seeding is an explicit `habitpulse init`
    result = init_db(seed=False)
    logger.info("database_ready", path=result["data"]["db_path"])

    yield

    logger.info("read_api_stopped")


app = FastAPI(
    title="HabitPulse Analytics API",
    description="Read-only behavioral metrics over the local activity log",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

security_config = dashboard_config.get("security", {})
allowed_origins = security_config.get(
    "allowed_origins", ["http://localhost:3000", "http://127.0.0.1:3000"]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail), code=f"HTTP_{exc.status_code}").model_dump(),
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Parameters the engine rejects are client errors, not server faults."""
    logger.warning("invalid_parameter", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(error=str(exc), code="INVALID_PARAMETER").model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal server error", code="INTERNAL_ERROR").model_dump(),
    )


app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "habitpulse.dashboard.main:app",
        host=dashboard_config.get("host", "127.0.0.1"),
        port=dashboard_config.get("api_port", 8080),
        reload=True,
        log_level="info",
    )
