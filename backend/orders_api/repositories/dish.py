"""
Dish Repository - Data access for menu items and their stock levels.
"""

from dataclasses import dataclass
from typing import Sequence
from sqlalchemy import Select

from orders_api.models import Dish
from shared.config.constants import Limits
from .base import BaseRepository, RepositoryFilters


@dataclass
class DishFilters(RepositoryFilters):
    """Filters specific to dishes."""

    is_available: bool | None = None
    low_stock: bool | None = None
    out_of_stock: bool | None = None


class DishRepository(BaseRepository[Dish]):
    """Repository for Dish entities."""

    @property
    def model(self) -> type[Dish]:
        return Dish

    def _ordering(self) -> list:
        return [Dish.name, Dish.id]

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply dish-specific filters."""
        if not isinstance(filters, DishFilters):
            filters = DishFilters(**filters.__dict__)

        if filters.is_available is not None:
            query = query.where(Dish.is_available.is_(filters.is_available))

        if filters.low_stock is not None:
            query = query.where(Dish.is_low_stock.is_(filters.low_stock))

        if filters.out_of_stock is not None:
            query = query.where(Dish.is_out_of_stock.is_(filters.out_of_stock))

        return query

    def find_low_stock(self, restaurant_id: int) -> Sequence[Dish]:
        """Dishes at or below their low-stock threshold (including empty ones)."""
        filters = DishFilters(low_stock=True, limit=Limits.MAX_PAGE_SIZE)
        return self.find_all(restaurant_id, filters)

    def find_out_of_stock(self, restaurant_id: int) -> Sequence[Dish]:
        filters = DishFilters(out_of_stock=True, limit=Limits.MAX_PAGE_SIZE)
        return self.find_all(restaurant_id, filters)
