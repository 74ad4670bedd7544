"""Read API - HTTP surface over the analytics engine

Every route is a GET. The API never writes to the record store; logging
sessions and editing the timetable happen through the CLI or the store
functions directly.

Components:
    main.py: FastAPI app, lifespan, CORS, error handlers
    dependencies.py: Shared AnalyticsEngine instance
    models.py: Pydantic response schemas
    routes/: Health and analytics endpoints

Configuration: args/dashboard.yaml
"""

from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_PATH = PROJECT_ROOT / "args" / "dashboard.yaml"

__all__ = ["PROJECT_ROOT", "CONFIG_PATH"]
