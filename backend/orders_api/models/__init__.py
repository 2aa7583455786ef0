"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class and AuditMixin
- restaurant: Restaurant
- dish: Dish
- table: Table
- order: Order, OrderItem, OrderStatusHistory
"""

# Base classes
from .base import Base, AuditMixin, utcnow

# Tenant
from .restaurant import Restaurant

# Menu items with stock
from .dish import Dish

# Tables
from .table import Table

# Orders
from .order import Order, OrderItem, OrderStatusHistory

__all__ = [
    # Base
    "Base",
    "AuditMixin",
    "utcnow",
    # Tenant
    "Restaurant",
    # Catalog
    "Dish",
    # Tables
    "Table",
    # Orders
    "Order",
    "OrderItem",
    "OrderStatusHistory",
]
