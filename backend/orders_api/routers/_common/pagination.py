"""
Standardized Pagination for list routers.

Usage:
    from orders_api.routers._common.pagination import Pagination, get_pagination

    @router.get("/api/orders")
    def list_orders(
        pagination: Pagination = Depends(get_pagination),
        db: Session = Depends(get_db),
    ):
        orders, total = OrderService(db).list_orders(limit=pagination.limit, offset=pagination.offset)
        return {"items": orders, "pagination": pagination.to_dict(total=total)}
"""

from dataclasses import dataclass
from typing import Any
from fastapi import Query

from shared.config.constants import Limits


@dataclass
class Pagination:
    """
    Pagination parameters with validation.

    Attributes:
        limit: Maximum items per page (1 to max_limit)
        offset: Number of items to skip
        max_limit: Maximum allowed limit (default 200)
    """

    limit: int
    offset: int
    max_limit: int = Limits.MAX_PAGE_SIZE

    def __post_init__(self):
        """Validate and normalize values."""
        self.limit = min(max(1, self.limit), self.max_limit)
        self.offset = max(0, self.offset)

    @property
    def page(self) -> int:
        """Current page number (1-indexed)."""
        return (self.offset // self.limit) + 1

    def to_dict(self, total: int | None = None) -> dict[str, Any]:
        """
        Convert to dictionary for response.

        Args:
            total: Total count of items (optional)

        Returns:
            Dictionary with pagination metadata
        """
        result = {
            "limit": self.limit,
            "offset": self.offset,
            "page": self.page,
        }

        if total is not None:
            result["total"] = total
            result["pages"] = (total + self.limit - 1) // self.limit
            result["has_next"] = self.offset + self.limit < total
            result["has_prev"] = self.offset > 0

        return result


def get_pagination(
    limit: int = Query(
        default=Limits.DEFAULT_PAGE_SIZE,
        ge=1,
        le=Limits.MAX_PAGE_SIZE,
        description="Maximum number of items to return",
    ),
    offset: int = Query(
        default=Limits.DEFAULT_OFFSET,
        ge=0,
        description="Number of items to skip",
    ),
) -> Pagination:
    """
    FastAPI dependency for pagination.

    Usage:
        @router.get("/items")
        def list_items(pagination: Pagination = Depends(get_pagination)):
            ...
    """
    return Pagination(limit=limit, offset=offset)
