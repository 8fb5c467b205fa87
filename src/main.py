"""FastAPI application entry point for the crowd density service."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware.error_handler import global_exception_handler
from src.api.middleware.logging import StructuredLoggingMiddleware
from src.api.routes.density import router as density_router
from src.api.routes.health import router as health_router
from src.api.routes.reports import router as reports_router
from src.config import settings
from src.domains.density.config import default_config
from src.shared.logging import setup_logging

logger = structlog.get_logger()

# Track app start time for uptime calculation
APP_START_TIME: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown logic."""
    global APP_START_TIME
    APP_START_TIME = time.time()
    setup_logging(settings.log_level)

    logger.info(
        "density_service_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        scoring_version=default_config.scoring_version,
    )

    # Scoring degrades to "no data" without a database, so a failed
    # init must not keep the service from starting.
    try:
        from src.db.database import init_db

        await init_db()
    except Exception:
        logger.warning("database_init_failed", exc_info=True)

    yield

    logger.info("density_service_shutting_down")


app = FastAPI(
    title="Crowd Density",
    description="Crowd density scoring for points of interest on a live map",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Structured logging middleware
app.add_middleware(StructuredLoggingMiddleware)

# Global exception handler
app.add_exception_handler(Exception, global_exception_handler)

# Register routers
app.include_router(health_router)
app.include_router(density_router)
app.include_router(reports_router)


def get_uptime() -> int:
    """Get application uptime in seconds."""
    if APP_START_TIME == 0.0:
        return 0
    return int(time.time() - APP_START_TIME)


def run() -> None:
    """Serve the app with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
