"""
Shared Pydantic schemas used across the application.

Money is always integer cents. Domain rules (positive quantities,
non-negative customization prices, rating range) are enforced by the
services, so these request models stay permissive on those fields.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from shared.config.constants import Limits


# =============================================================================
# Common Types
# =============================================================================

OrderStatus = Literal[
    "pending",
    "confirmed",
    "preparing",
    "ready",
    "out_for_delivery",
    "delivered",
    "completed",
    "cancelled",
    "rejected",
]
OrderType = Literal["dine_in", "takeout", "delivery"]
PaymentMethod = Literal["cash", "card", "online", "wallet"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded"]
TableStatus = Literal["available", "occupied", "reserved", "maintenance", "out_of_service"]
StockOperation = Literal["add", "subtract", "set"]


class ErrorResponse(BaseModel):
    """Error body rendered for every AppException."""

    detail: str


# =============================================================================
# Order Request Schemas
# =============================================================================


class CustomizationInput(BaseModel):
    """A priced option on an order line (e.g. "Size: Large", +150)."""

    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    option: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price_cents: int = 0


class OrderItemInput(BaseModel):
    """One requested line: a dish, how many, and its customizations."""

    dish_id: int
    quantity: int
    customizations: list[CustomizationInput] = Field(default_factory=list)
    special_instructions: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


class DeliveryAddress(BaseModel):
    street: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    city: str = Field(min_length=1, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    zip_code: str | None = Field(default=None, max_length=20)
    country: str | None = Field(default=None, max_length=100)


class CreateOrderRequest(BaseModel):
    """Request to place an order. The customer is the authenticated user."""

    restaurant_id: int
    order_type: OrderType
    items: list[OrderItemInput]
    payment_method: PaymentMethod
    table_id: int | None = None  # dine_in only
    delivery_address: DeliveryAddress | None = None  # delivery only
    delivery_instructions: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)
    special_instructions: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus
    notes: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


class ReviewRequest(BaseModel):
    rating: int
    review: str | None = Field(default=None, max_length=Limits.MAX_REVIEW_LENGTH)


# =============================================================================
# Order Output Schemas
# =============================================================================


class CustomizationOutput(BaseModel):
    name: str
    option: str
    price_cents: int


class OrderItemOutput(BaseModel):
    """Output for a single order line (name and price as captured at order time)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    dish_id: int
    name: str
    unit_price_cents: int
    quantity: int
    customizations: list[CustomizationOutput] = Field(default_factory=list)
    special_instructions: str | None = None
    total_cents: int


class StatusHistoryOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: OrderStatus
    actor_id: int
    notes: str | None = None
    created_at: datetime


class OrderOutput(BaseModel):
    """Full order view with lines, fee breakdown and status history."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    restaurant_id: int
    customer_id: int
    table_id: int | None = None
    order_type: OrderType
    status: OrderStatus
    items: list[OrderItemOutput]
    subtotal_cents: int
    tax_cents: int
    service_charge_cents: int
    delivery_fee_cents: int
    discount_cents: int
    total_cents: int
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    delivery_address: DeliveryAddress | None = None
    delivery_instructions: str | None = None
    special_instructions: str | None = None
    actual_delivery_time: datetime | None = None
    cancellation_reason: str | None = None
    cancelled_by: int | None = None
    cancelled_at: datetime | None = None
    rating: int | None = None
    review: str | None = None
    review_date: datetime | None = None
    status_history: list[StatusHistoryOutput]
    created_at: datetime


class OrderListOutput(BaseModel):
    """Paginated list of orders, newest first."""

    items: list[OrderOutput]
    pagination: dict[str, Any]


# =============================================================================
# Dish Schemas
# =============================================================================


class DishOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: int
    name: str
    price_cents: int
    is_available: bool
    stock_quantity: int
    low_stock_threshold: int
    is_low_stock: bool
    is_out_of_stock: bool


class StockUpdateRequest(BaseModel):
    """Manual stock correction. "set" overwrites; "add"/"subtract" adjust."""

    quantity: int = Field(ge=0)
    operation: StockOperation


class AvailabilityRequest(BaseModel):
    is_available: bool


# =============================================================================
# Table Schemas
# =============================================================================


class TableOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: int
    table_number: str
    capacity: int
    status: TableStatus
    current_order_id: int | None = None
    last_cleaned_at: datetime | None = None


class TableStatusRequest(BaseModel):
    status: TableStatus
