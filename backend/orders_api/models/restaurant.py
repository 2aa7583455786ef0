"""
Restaurant Model: tenant root holding the fee configuration used for pricing.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, BigIntPK

if TYPE_CHECKING:
    from .dish import Dish
    from .table import Table


class Restaurant(AuditMixin, Base):
    """
    A restaurant (tenant). Every dish, table and order belongs to one.
    Inherits: is_active, created_at, updated_at from AuditMixin.

    Fee settings:
    - tax_rate, service_charge_rate: percentages (8.50 means 8.5%)
    - delivery_fee_cents: flat fee added to delivery orders
    - allow_delivery, allow_takeout: informational channel flags
    """

    __tablename__ = "restaurant"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    tax_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"), nullable=False)
    service_charge_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), nullable=False
    )
    delivery_fee_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    allow_delivery: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    allow_takeout: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        CheckConstraint("tax_rate >= 0 AND tax_rate <= 100", name="chk_restaurant_tax_rate"),
        CheckConstraint(
            "service_charge_rate >= 0 AND service_charge_rate <= 100",
            name="chk_restaurant_service_charge_rate",
        ),
        CheckConstraint("delivery_fee_cents >= 0", name="chk_restaurant_delivery_fee"),
    )

    # Relationships
    dishes: Mapped[list["Dish"]] = relationship(back_populates="restaurant")
    tables: Mapped[list["Table"]] = relationship(back_populates="restaurant")
