"""
Health check endpoints for the REST API.
Provides basic and detailed health status of the service and its database.
"""

import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal


logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check():
    """
    Basic health check endpoint.
    Returns service status without checking dependencies.
    """
    return {
        "status": "healthy",
        "service": "orders-api",
        "environment": settings.environment,
    }


@router.get("/health/detailed")
def detailed_health_check():
    """
    Detailed health check that verifies database connectivity.

    Returns 503 Service Unavailable if the database is down.
    """
    start_time = time.perf_counter()
    database = {"status": "healthy"}
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Health check failed", component="database", error=str(e))
        database = {"status": "unhealthy", "error": str(e)}
    database["latency_ms"] = round((time.perf_counter() - start_time) * 1000, 2)

    healthy = database["status"] == "healthy"
    checks = {
        "service": "orders-api",
        "environment": settings.environment,
        "status": "healthy" if healthy else "degraded",
        "dependencies": {"database": database},
    }

    if not healthy:
        return JSONResponse(status_code=503, content=checks)
    return checks
