"""
Order Models: Order, OrderItem, OrderStatusHistory.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import (
    FULFILLED_STATUSES,
    VOIDED_STATUSES,
    OrderStatus,
    PaymentStatus,
)
from .base import AuditMixin, Base, BigIntPK, utcnow

if TYPE_CHECKING:
    from .restaurant import Restaurant
    from .table import Table


class Order(AuditMixin, Base):
    """
    A customer order: the priced item lines, fees and lifecycle state.
    Inherits: is_active, created_at, updated_at from AuditMixin.

    All money fields are integer cents. total_cents is always
    subtotal + tax + service charge + delivery fee - discount.
    """

    __tablename__ = "customer_order"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    # Users live in the auth service
    customer_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    table_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("restaurant_table.id"), index=True
    )

    # "ORD" + yymmdd + zero-padded daily sequence
    order_number: Mapped[str] = mapped_column(Text, nullable=False)
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    daily_sequence: Mapped[int] = mapped_column(Integer, nullable=False)

    order_type: Mapped[str] = mapped_column(Text, nullable=False)  # dine_in, takeout, delivery
    status: Mapped[str] = mapped_column(
        Text, default=OrderStatus.PENDING.value, nullable=False, index=True
    )

    subtotal_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    tax_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    service_charge_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    delivery_fee_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    discount_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    payment_method: Mapped[str] = mapped_column(Text, nullable=False)  # cash, card, online, wallet
    payment_status: Mapped[str] = mapped_column(
        Text, default=PaymentStatus.PENDING.value, nullable=False
    )

    # {"street", "city", "state", "zip_code", "country"}; delivery orders only
    delivery_address: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)
    delivery_instructions: Mapped[Optional[str]] = mapped_column(Text)
    special_instructions: Mapped[Optional[str]] = mapped_column(Text)
    actual_delivery_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text)
    cancelled_by: Mapped[Optional[int]] = mapped_column(BigInteger)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    rating: Mapped[Optional[int]] = mapped_column(Integer)
    review: Mapped[Optional[str]] = mapped_column(Text)
    review_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint("restaurant_id", "order_number", name="uq_order_restaurant_number"),
        UniqueConstraint(
            "restaurant_id", "order_date", "daily_sequence", name="uq_order_restaurant_day_seq"
        ),
        CheckConstraint("subtotal_cents >= 0", name="chk_order_subtotal_non_negative"),
        CheckConstraint("total_cents >= 0", name="chk_order_total_non_negative"),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="chk_order_rating"),
        Index("ix_order_restaurant_status", "restaurant_id", "status"),
        Index("ix_order_restaurant_created", "restaurant_id", "created_at"),
    )

    # Relationships
    restaurant: Mapped["Restaurant"] = relationship()
    table: Mapped[Optional["Table"]] = relationship()
    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
    )
    status_history: Mapped[list["OrderStatusHistory"]] = relationship(
        back_populates="order",
        order_by="OrderStatusHistory.id",
        cascade="all, delete-orphan",
    )

    def transition_to(self, new_status: str, actor_id: int, notes: str | None = None) -> "OrderStatusHistory":
        """
        Move the order to new_status and append the matching history entry.

        Whether the move is legal is decided by the caller's transition policy.
        Fulfilled states stamp actual_delivery_time; voided states stamp
        cancelled_by and cancelled_at.
        """
        now = utcnow()
        self.status = new_status
        if new_status in FULFILLED_STATUSES:
            self.actual_delivery_time = now
        elif new_status in VOIDED_STATUSES:
            self.cancelled_by = actor_id
            self.cancelled_at = now

        entry = OrderStatusHistory(
            status=new_status,
            actor_id=actor_id,
            notes=notes,
            created_at=now,
        )
        self.status_history.append(entry)
        return entry

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, number='{self.order_number}', status='{self.status}')>"


class OrderItem(Base):
    """
    One priced line of an order. Dish name and unit price are captured at
    order time, so later menu edits never change a placed order.

    customizations: [{"name", "option", "price_cents"}], each price counted
    once per line regardless of quantity.
    """

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("customer_order.id"), nullable=False, index=True
    )
    # No FK: the dish may be deleted later; cancellation skips missing dishes
    dish_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    customizations: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    special_instructions: Mapped[Optional[str]] = mapped_column(Text)
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_item_quantity_positive"),
        CheckConstraint("unit_price_cents >= 0", name="chk_order_item_price_non_negative"),
    )

    # Relationships
    order: Mapped["Order"] = relationship(back_populates="items")

    def __repr__(self) -> str:
        return f"<OrderItem(id={self.id}, dish_id={self.dish_id}, qty={self.quantity})>"


class OrderStatusHistory(Base):
    """Append-only log of status changes. Read back in insertion order."""

    __tablename__ = "order_status_history"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("customer_order.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(Text, nullable=False)
    actor_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    order: Mapped["Order"] = relationship(back_populates="status_history")

    def __repr__(self) -> str:
        return f"<OrderStatusHistory(order_id={self.order_id}, status='{self.status}')>"
