"""
Orders API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import FastAPI

from shared.config.settings import settings
from orders_api.core import lifespan, configure_cors, register_middlewares
from orders_api.routers import (
    orders_router,
    dishes_router,
    tables_router,
    health_router,
)


# Create FastAPI application
app = FastAPI(
    title="Restaurant Orders API",
    description="Order placement, status tracking, stock and table occupancy",
    version="0.1.0",
    lifespan=lifespan,
)

register_middlewares(app)
configure_cors(app)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(orders_router)
app.include_router(dishes_router)
app.include_router(tables_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "orders_api.main:app",
        host="0.0.0.0",
        port=settings.api_port,
        reload=settings.debug,
    )
