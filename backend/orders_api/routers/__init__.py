"""
API routers.
"""

from .orders import router as orders_router
from .dishes import router as dishes_router
from .tables import router as tables_router
from .public import health_router

__all__ = [
    "orders_router",
    "dishes_router",
    "tables_router",
    "health_router",
]
