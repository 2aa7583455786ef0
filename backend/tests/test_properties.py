"""
Property-based tests with Hypothesis.

Pure model and pricing invariants; no database fixtures.
"""

from decimal import Decimal

from hypothesis import given, settings, strategies as st

from orders_api.models import Dish, Table
from orders_api.services.domain.pricing import FeeSettings, compute_totals, line_total
from shared.utils.schemas import CustomizationInput


rates = st.decimals(min_value=0, max_value=100, places=2, allow_nan=False, allow_infinity=False)
order_types = st.sampled_from(["dine_in", "takeout", "delivery"])


class TestStockProperties:
    """Stock never goes negative and the flags always match the quantity."""

    @given(
        stock=st.integers(min_value=0, max_value=10_000),
        threshold=st.integers(min_value=0, max_value=100),
        deltas=st.lists(st.integers(min_value=-500, max_value=500), max_size=20),
    )
    @settings(max_examples=100)
    def test_adjust_stock_keeps_invariants(self, stock, threshold, deltas):
        dish = Dish(name="Prop", price_cents=100, stock_quantity=stock, low_stock_threshold=threshold)

        for delta in deltas:
            dish.adjust_stock(delta)

            assert dish.stock_quantity >= 0
            assert dish.is_out_of_stock == (dish.stock_quantity == 0)
            assert dish.is_low_stock == (dish.stock_quantity <= threshold)

    @given(
        stock=st.integers(min_value=0, max_value=10_000),
        quantity=st.integers(min_value=1, max_value=10_000),
    )
    def test_reserve_then_restore_when_enough_stock(self, stock, quantity):
        dish = Dish(name="Prop", price_cents=100, stock_quantity=stock, low_stock_threshold=10)

        dish.adjust_stock(-quantity)
        dish.adjust_stock(quantity)

        assert dish.stock_quantity == max(stock, quantity)


class TestPricingProperties:
    """Totals always add up."""

    @given(
        lines=st.lists(st.integers(min_value=0, max_value=1_000_000), max_size=30),
        tax_rate=rates,
        service_rate=rates,
        delivery_fee=st.integers(min_value=0, max_value=5_000),
        order_type=order_types,
    )
    @settings(max_examples=100)
    def test_total_is_sum_of_parts(self, lines, tax_rate, service_rate, delivery_fee, order_type):
        fees = FeeSettings(
            tax_rate=Decimal(tax_rate),
            service_charge_rate=Decimal(service_rate),
            delivery_fee_cents=delivery_fee,
        )

        totals = compute_totals(lines, fees, order_type)

        assert totals.subtotal_cents == sum(lines)
        assert totals.total_cents == (
            totals.subtotal_cents
            + totals.tax_cents
            + totals.service_charge_cents
            + totals.delivery_fee_cents
        )
        assert totals.tax_cents >= 0
        assert totals.service_charge_cents >= 0

    @given(delivery_fee=st.integers(min_value=1, max_value=5_000), order_type=order_types)
    def test_delivery_fee_only_for_delivery(self, delivery_fee, order_type):
        totals = compute_totals([1000], FeeSettings(delivery_fee_cents=delivery_fee), order_type)

        expected = delivery_fee if order_type == "delivery" else 0
        assert totals.delivery_fee_cents == expected

    @given(
        unit_price=st.integers(min_value=0, max_value=100_000),
        quantity=st.integers(min_value=1, max_value=99),
        extras=st.lists(st.integers(min_value=0, max_value=5_000), max_size=5),
    )
    def test_line_total_extras_added_once(self, unit_price, quantity, extras):
        customizations = [
            CustomizationInput(name=f"Extra {i}", option="Yes", price_cents=price)
            for i, price in enumerate(extras)
        ]

        assert line_total(unit_price, quantity, customizations) == unit_price * quantity + sum(extras)
        assert line_total(unit_price, quantity + 1, customizations) - line_total(
            unit_price, quantity, customizations
        ) == unit_price


class TestTableProperties:
    """A table holds a current order exactly when it is occupied."""

    @given(
        ops=st.lists(
            st.tuples(
                st.sampled_from(["occupy", "free", "reserve", "set_status"]),
                st.integers(min_value=1, max_value=1_000),
                st.sampled_from(["available", "occupied", "reserved", "maintenance", "out_of_service"]),
            ),
            max_size=25,
        )
    )
    @settings(max_examples=100)
    def test_current_order_only_when_occupied(self, ops):
        table = Table(table_number="1", capacity=2, status="available", current_order_id=None)

        for op, order_id, status in ops:
            if op == "occupy":
                was_occupiable = table.status in ("available", "reserved")
                assert table.occupy(order_id) is was_occupiable
                if was_occupiable:
                    assert table.current_order_id == order_id
            elif op == "free":
                table.free()
            elif op == "reserve":
                table.reserve()
            elif status != "occupied":
                table.set_status(status)

            if table.status != "occupied":
                assert table.current_order_id is None
