"""
Dish Model: menu item with stock tracking.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import DEFAULT_LOW_STOCK_THRESHOLD
from .base import AuditMixin, Base, BigIntPK

if TYPE_CHECKING:
    from .restaurant import Restaurant


class Dish(AuditMixin, Base):
    """
    A menu item owned by a restaurant.
    Inherits: is_active, created_at, updated_at from AuditMixin.

    is_low_stock and is_out_of_stock are derived from stock_quantity and are
    recomputed by check_stock_status() after every stock mutation.
    """

    __tablename__ = "dish"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    low_stock_threshold: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_LOW_STOCK_THRESHOLD, nullable=False
    )
    is_low_stock: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_out_of_stock: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="chk_dish_price_non_negative"),
        CheckConstraint("stock_quantity >= 0", name="chk_dish_stock_non_negative"),
        CheckConstraint("low_stock_threshold >= 0", name="chk_dish_threshold_non_negative"),
        Index("ix_dish_restaurant_low_stock", "restaurant_id", "is_low_stock"),
        Index("ix_dish_restaurant_available", "restaurant_id", "is_available"),
    )

    # Relationships
    restaurant: Mapped["Restaurant"] = relationship(back_populates="dishes")

    def check_stock_status(self) -> "Dish":
        """Recompute the derived stock flags from stock_quantity."""
        self.is_low_stock = self.stock_quantity <= self.low_stock_threshold
        self.is_out_of_stock = self.stock_quantity == 0
        return self

    def adjust_stock(self, delta: int) -> "Dish":
        """
        Sole mutator of stock quantity.

        The result is clamped at zero, so a decrement followed by the inverse
        increment only restores the original quantity if nothing was clamped.
        """
        self.stock_quantity = max(0, self.stock_quantity + delta)
        return self.check_stock_status()

    def set_stock(self, quantity: int) -> "Dish":
        """Overwrite the stock count (manual inventory correction)."""
        self.stock_quantity = max(0, quantity)
        return self.check_stock_status()

    def __repr__(self) -> str:
        return f"<Dish(id={self.id}, name='{self.name}', stock={self.stock_quantity})>"
