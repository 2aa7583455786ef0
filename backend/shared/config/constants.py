"""
Centralized constants for the backend application.
Avoid magic strings and repeated constants.

Usage:
    from shared.config.constants import Roles, STAFF_ROLES, OrderStatus

    if role in STAFF_ROLES:
        ...

    if order.status == OrderStatus.PENDING:
        ...
"""

from enum import Enum
from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles:
    """User role constants (issued by the auth service)."""

    SUPER_ADMIN: Final[str] = "super_admin"
    RESTAURANT_OWNER: Final[str] = "restaurant_owner"
    STAFF: Final[str] = "staff"
    CUSTOMER: Final[str] = "customer"


# Role groups for common access patterns
STAFF_ROLES: Final[frozenset[str]] = frozenset(
    {Roles.SUPER_ADMIN, Roles.RESTAURANT_OWNER, Roles.STAFF}
)


# =============================================================================
# Order Constants
# =============================================================================


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class OrderType(str, Enum):
    """Order fulfillment channels."""

    DINE_IN = "dine_in"
    TAKEOUT = "takeout"
    DELIVERY = "delivery"


class PaymentStatus(str, Enum):
    """Recorded payment state. No gateway drives it."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


# Status groups
ORDER_STATUS_VALUES: Final[frozenset[str]] = frozenset(s.value for s in OrderStatus)
FULFILLED_STATUSES: Final[frozenset[str]] = frozenset(
    {OrderStatus.DELIVERED.value, OrderStatus.COMPLETED.value}
)
VOIDED_STATUSES: Final[frozenset[str]] = frozenset(
    {OrderStatus.CANCELLED.value, OrderStatus.REJECTED.value}
)
TERMINAL_STATUSES: Final[frozenset[str]] = FULFILLED_STATUSES | VOIDED_STATUSES


# =============================================================================
# Table Constants
# =============================================================================


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out_of_service"


# Tables an order can be seated at
OCCUPIABLE_TABLE_STATUSES: Final[frozenset[str]] = frozenset(
    {TableStatus.AVAILABLE.value, TableStatus.RESERVED.value}
)


# =============================================================================
# Stock Constants
# =============================================================================


class StockOperation(str, Enum):
    """Manual stock update operations."""

    ADD = "add"
    SUBTRACT = "subtract"
    SET = "set"


DEFAULT_LOW_STOCK_THRESHOLD: Final[int] = 10


# =============================================================================
# Status Transitions
# =============================================================================

# Adjacency table used only by the strict transition policy (from -> allowed to states).
# Cancellation and rejection are reachable from every non-terminal state.
_VOID = [OrderStatus.CANCELLED.value, OrderStatus.REJECTED.value]

ORDER_TRANSITIONS: Final[dict[str, list[str]]] = {
    OrderStatus.PENDING.value: [OrderStatus.CONFIRMED.value, *_VOID],
    OrderStatus.CONFIRMED.value: [OrderStatus.PREPARING.value, *_VOID],
    OrderStatus.PREPARING.value: [OrderStatus.READY.value, *_VOID],
    OrderStatus.READY.value: [
        OrderStatus.OUT_FOR_DELIVERY.value,
        OrderStatus.COMPLETED.value,
        *_VOID,
    ],
    OrderStatus.OUT_FOR_DELIVERY.value: [OrderStatus.DELIVERED.value, *_VOID],
    OrderStatus.DELIVERED.value: [],  # Terminal state
    OrderStatus.COMPLETED.value: [],  # Terminal state
    OrderStatus.CANCELLED.value: [],  # Terminal state
    OrderStatus.REJECTED.value: [],  # Terminal state
}

# States only delivery orders may enter under the strict policy
DELIVERY_ONLY_STATUSES: Final[frozenset[str]] = frozenset(
    {OrderStatus.OUT_FOR_DELIVERY.value, OrderStatus.DELIVERED.value}
)


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Quantity
    MIN_QUANTITY: Final[int] = 1

    # Review rating
    MIN_RATING: Final[int] = 1
    MAX_RATING: Final[int] = 5

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 200
    MAX_NOTES_LENGTH: Final[int] = 500
    MAX_REVIEW_LENGTH: Final[int] = 2000

    # Pagination defaults
    DEFAULT_PAGE_SIZE: Final[int] = 10
    MAX_PAGE_SIZE: Final[int] = 200
    DEFAULT_OFFSET: Final[int] = 0
