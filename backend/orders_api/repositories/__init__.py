"""
Repository Pattern implementation.
Centralizes data access with restaurant isolation and row locking.

Usage:
    from orders_api.repositories import DishRepository, DishFilters

    repo = DishRepository(db)
    dishes = repo.find_all(restaurant_id=1, filters=DishFilters(low_stock=True))
    dish = repo.find_by_id(123, restaurant_id=1)
"""

from .base import BaseRepository, RepositoryFilters
from .restaurant import RestaurantRepository
from .dish import DishRepository, DishFilters
from .table import TableRepository, TableFilters
from .order import OrderRepository, OrderFilters

__all__ = [
    # Base
    "BaseRepository",
    "RepositoryFilters",
    # Restaurant
    "RestaurantRepository",
    # Dish
    "DishRepository",
    "DishFilters",
    # Table
    "TableRepository",
    "TableFilters",
    # Order
    "OrderRepository",
    "OrderFilters",
]
