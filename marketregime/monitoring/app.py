"""MarketRegime – Dashboard backend application.

FastAPI application serving correlation monitor and regime data to the
dashboard UI.

Run with:
    uvicorn marketregime.monitoring.app:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from fastapi import FastAPI

from marketregime.core.config import get_config
from marketregime.core.kv_store import PostgresKeyValueStore
from marketregime.core.logging import get_logger, setup_logging
from marketregime.monitoring import api
from marketregime.monitoring.api import router as dashboard_router


logger = get_logger(__name__)


# ============================================================================
# Application Setup
# ============================================================================


app = FastAPI(
    title="MarketRegime Dashboard Backend",
    description="Cross-asset correlation and market regime data for the dashboard",
    version="0.2.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.include_router(dashboard_router)


# ============================================================================
# Health Check
# ============================================================================


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


# ============================================================================
# Startup/Shutdown Events
# ============================================================================


@app.on_event("startup")
async def startup_event() -> None:
    setup_logging(get_config())
    logger.info("MarketRegime dashboard backend starting up")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Release database connections held by the Postgres store."""

    services = api._services
    if services is not None and isinstance(services.store, PostgresKeyValueStore):
        services.store.db_manager.close_all()
    logger.info("MarketRegime dashboard backend shutting down")
