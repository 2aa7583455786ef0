"""
Restaurant Repository - Data access for restaurants (tenant roots).
"""

from sqlalchemy import Select, select

from orders_api.models import Restaurant
from .base import BaseRepository, RepositoryFilters


class RestaurantRepository(BaseRepository[Restaurant]):
    """Repository for Restaurant entities. A restaurant scopes to itself."""

    @property
    def model(self) -> type[Restaurant]:
        return Restaurant

    def _scoped(self, restaurant_id: int | None, include_inactive: bool = False) -> Select:
        query = select(Restaurant)
        if restaurant_id is not None:
            query = query.where(Restaurant.id == restaurant_id)
        if not include_inactive:
            query = query.where(Restaurant.is_active.is_(True))
        return query

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        return query
