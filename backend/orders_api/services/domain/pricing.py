"""
Order pricing.

Pure functions over integer cents. Percent rates are Decimals (8.50 = 8.5%)
and derived amounts are rounded half-up to whole cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Protocol

from shared.config.constants import OrderType


@dataclass(frozen=True)
class FeeSettings:
    """Per-restaurant fee configuration read at order time."""

    tax_rate: Decimal = Decimal("0")
    service_charge_rate: Decimal = Decimal("0")
    delivery_fee_cents: int = 0

    @classmethod
    def from_restaurant(cls, restaurant) -> "FeeSettings":
        return cls(
            tax_rate=Decimal(restaurant.tax_rate or 0),
            service_charge_rate=Decimal(restaurant.service_charge_rate or 0),
            delivery_fee_cents=restaurant.delivery_fee_cents or 0,
        )


class PricedCustomization(Protocol):
    price_cents: int


@dataclass(frozen=True)
class OrderTotals:
    subtotal_cents: int
    tax_cents: int
    service_charge_cents: int
    delivery_fee_cents: int
    discount_cents: int
    total_cents: int


def round_half_up(amount: Decimal) -> int:
    """Round a Decimal amount of cents to the nearest cent, halves away from zero."""
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percent_of(amount_cents: int, rate: Decimal) -> int:
    return round_half_up(Decimal(amount_cents) * Decimal(rate) / Decimal(100))


def line_total(
    unit_price_cents: int,
    quantity: int,
    customizations: Iterable[PricedCustomization] = (),
) -> int:
    """
    Price of one order line.

    Customization prices are added once per line, not multiplied by quantity.
    """
    return unit_price_cents * quantity + sum(c.price_cents for c in customizations)


def compute_totals(
    line_totals: Iterable[int],
    fees: FeeSettings,
    order_type: str,
    discount_cents: int = 0,
) -> OrderTotals:
    """
    Fee breakdown for an order.

    Tax and service charge are both computed on the subtotal.
    The delivery fee only applies to delivery orders.
    """
    subtotal = sum(line_totals)
    tax = percent_of(subtotal, fees.tax_rate)
    service = percent_of(subtotal, fees.service_charge_rate)
    delivery = fees.delivery_fee_cents if order_type == OrderType.DELIVERY.value else 0

    return OrderTotals(
        subtotal_cents=subtotal,
        tax_cents=tax,
        service_charge_cents=service,
        delivery_fee_cents=delivery,
        discount_cents=discount_cents,
        total_cents=subtotal + tax + service + delivery - discount_cents,
    )
