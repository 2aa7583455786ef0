"""
Domain Services - application layer.

Services contain business logic and orchestrate operations.
They use Repositories for data access.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from orders_api.services.domain import OrderService

    # In router
    service = OrderService(db)
    order = service.create_order(customer_id, body)
"""

from .order_service import OrderService
from .dish_service import DishService
from .table_service import TableService
from .pricing import FeeSettings, OrderTotals, compute_totals, line_total, round_half_up
from .status_policy import PermissivePolicy, StrictPolicy, get_transition_policy

__all__ = [
    # Services
    "OrderService",
    "DishService",
    "TableService",
    # Pricing
    "FeeSettings",
    "OrderTotals",
    "compute_totals",
    "line_total",
    "round_half_up",
    # Transition policies
    "PermissivePolicy",
    "StrictPolicy",
    "get_transition_policy",
]
