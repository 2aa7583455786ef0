"""
Tests for order pricing functions.
"""

from decimal import Decimal

from orders_api.services.domain.pricing import (
    FeeSettings,
    compute_totals,
    line_total,
    round_half_up,
)
from shared.utils.schemas import CustomizationInput


class TestLineTotal:
    """Line price = unit price x quantity + customizations (once per line)."""

    def test_without_customizations(self):
        assert line_total(1299, 3) == 3897

    def test_customizations_are_not_multiplied_by_quantity(self):
        customizations = [
            CustomizationInput(name="Size", option="Large", price_cents=150),
            CustomizationInput(name="Extra", option="Cheese", price_cents=75),
        ]
        assert line_total(1299, 2, customizations) == 2598 + 225

    def test_free_customization(self):
        customizations = [CustomizationInput(name="Spice", option="Mild", price_cents=0)]
        assert line_total(500, 1, customizations) == 500


class TestRoundHalfUp:
    def test_rounds_half_up(self):
        assert round_half_up(Decimal("233.5")) == 234
        assert round_half_up(Decimal("274.8")) == 275
        assert round_half_up(Decimal("233.49")) == 233

    def test_exact_value_unchanged(self):
        assert round_half_up(Decimal("100")) == 100


class TestComputeTotals:
    """Fee breakdown for an order."""

    FEES = FeeSettings(
        tax_rate=Decimal("8.50"),
        service_charge_rate=Decimal("10.00"),
        delivery_fee_cents=299,
    )

    def test_takeout_order_breakdown(self):
        """Two 12.99 burgers with a 1.50 customization: 27.48 -> 32.57."""
        totals = compute_totals([2748], self.FEES, "takeout")

        assert totals.subtotal_cents == 2748
        assert totals.tax_cents == 234
        assert totals.service_charge_cents == 275
        assert totals.delivery_fee_cents == 0
        assert totals.discount_cents == 0
        assert totals.total_cents == 3257

    def test_delivery_fee_only_for_delivery(self):
        delivery = compute_totals([2748], self.FEES, "delivery")
        dine_in = compute_totals([2748], self.FEES, "dine_in")

        assert delivery.delivery_fee_cents == 299
        assert delivery.total_cents == 3257 + 299
        assert dine_in.delivery_fee_cents == 0

    def test_subtotal_sums_lines(self):
        totals = compute_totals([1000, 450, 50], FeeSettings(), "dine_in")

        assert totals.subtotal_cents == 1500
        assert totals.total_cents == 1500

    def test_discount_is_subtracted(self):
        totals = compute_totals([1000], FeeSettings(), "takeout", discount_cents=200)

        assert totals.total_cents == 800

    def test_fee_settings_from_restaurant(self, seed_restaurant):
        fees = FeeSettings.from_restaurant(seed_restaurant)

        assert fees.tax_rate == Decimal("8.50")
        assert fees.service_charge_rate == Decimal("10.00")
        assert fees.delivery_fee_cents == 299
