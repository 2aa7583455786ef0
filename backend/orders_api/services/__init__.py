"""
Services layer: domain services for orders, dishes and tables.
"""

from orders_api.services.domain import OrderService, DishService, TableService

__all__ = [
    "OrderService",
    "DishService",
    "TableService",
]
