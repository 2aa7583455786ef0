"""
Order Repository - Data access for orders.
Eager loading of items and status history prevents N+1 queries on listings.
"""

from dataclasses import dataclass
from datetime import date, datetime
from sqlalchemy.orm import selectinload
from sqlalchemy import Select, select, func

from orders_api.models import Order
from .base import BaseRepository, RepositoryFilters


@dataclass
class OrderFilters(RepositoryFilters):
    """Filters specific to orders."""

    status: str | None = None
    order_type: str | None = None
    customer_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class OrderRepository(BaseRepository[Order]):
    """
    Repository for Order entities.

    Guarantees eager loading of:
    - items
    - status_history
    """

    @property
    def model(self) -> type[Order]:
        return Order

    def _load_options(self) -> list:
        return [
            selectinload(Order.items),
            selectinload(Order.status_history),
        ]

    def _ordering(self) -> list:
        # Newest first
        return [Order.created_at.desc(), Order.id.desc()]

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply order-specific filters."""
        if not isinstance(filters, OrderFilters):
            filters = OrderFilters(**filters.__dict__)

        if filters.status:
            query = query.where(Order.status == filters.status)

        if filters.order_type:
            query = query.where(Order.order_type == filters.order_type)

        if filters.customer_id is not None:
            query = query.where(Order.customer_id == filters.customer_id)

        if filters.start_date:
            query = query.where(Order.created_at >= filters.start_date)

        if filters.end_date:
            query = query.where(Order.created_at <= filters.end_date)

        return query

    def next_daily_sequence(self, restaurant_id: int, order_date: date) -> int:
        """Next order sequence number for a restaurant on a given day (starts at 1)."""
        query = select(func.max(Order.daily_sequence)).where(
            Order.restaurant_id == restaurant_id,
            Order.order_date == order_date,
        )
        return (self._db.scalar(query) or 0) + 1
