"""
Order Domain Service.

Handles order placement, status changes, cancellation and reviews.
Every write runs as one transaction: rows that feed a write are locked
(dishes in ascending ID order, then the table) and any error rolls the
whole unit back.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.config.constants import (
    ORDER_STATUS_VALUES,
    TERMINAL_STATUSES,
    Limits,
    OrderStatus,
    OrderType,
)
from shared.config.logging import mask_user_id, orders_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import atomic
from shared.utils.exceptions import (
    DatabaseError,
    ForbiddenError,
    InvalidReferenceError,
    InvalidStateError,
    InvalidTransitionError,
    ItemUnavailableError,
    OrderNotFoundError,
    TableUnavailableError,
    ValidationError,
)
from shared.utils.schemas import CreateOrderRequest, OrderItemInput
from orders_api.models import Dish, Order, OrderItem, Table, utcnow
from orders_api.repositories import (
    DishRepository,
    OrderFilters,
    OrderRepository,
    RestaurantRepository,
    TableRepository,
)
from .pricing import FeeSettings, compute_totals, line_total
from .status_policy import TransitionPolicy, get_transition_policy


# Read-only lookup of a restaurant's fee configuration (None: unknown restaurant)
FeeProvider = Callable[[int], FeeSettings | None]


class OrderService:
    """
    Domain service for Order operations.

    Collaborators can be swapped for tests:
    - fee_provider: restaurant_id -> FeeSettings (defaults to the restaurant table)
    - transition_policy: defaults to the ORDER_TRANSITION_POLICY setting
    """

    def __init__(
        self,
        db: Session,
        fee_provider: FeeProvider | None = None,
        transition_policy: TransitionPolicy | None = None,
    ):
        self._db = db
        self._orders = OrderRepository(db)
        self._dishes = DishRepository(db)
        self._tables = TableRepository(db)
        self._restaurants = RestaurantRepository(db)
        self._fee_provider = fee_provider or self._restaurant_fees
        self._policy = transition_policy or get_transition_policy(settings.order_transition_policy)

    def _restaurant_fees(self, restaurant_id: int) -> FeeSettings | None:
        restaurant = self._restaurants.find_by_id(restaurant_id)
        if restaurant is None:
            return None
        return FeeSettings.from_restaurant(restaurant)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_order(self, order_id: int) -> Order:
        order = self._orders.find_by_id(order_id, include_inactive=True)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def list_orders(
        self,
        restaurant_id: int | None = None,
        status: str | None = None,
        order_type: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        customer_id: int | None = None,
        limit: int = Limits.DEFAULT_PAGE_SIZE,
        offset: int = Limits.DEFAULT_OFFSET,
    ) -> tuple[Sequence[Order], int]:
        """
        List orders newest first.

        Returns (page, total) where total ignores limit/offset.
        """
        filters = OrderFilters(
            status=status,
            order_type=order_type,
            customer_id=customer_id,
            start_date=_as_utc(start_date),
            end_date=_as_utc(end_date),
            limit=limit,
            offset=offset,
            include_inactive=True,
        )
        orders = self._orders.find_all(restaurant_id, filters)
        total = self._orders.count(restaurant_id, filters)
        return orders, total

    # =========================================================================
    # Order placement
    # =========================================================================

    def create_order(self, customer_id: int, request: CreateOrderRequest) -> Order:
        """
        Validate, price and persist a new order in "pending".

        Side effects, all in one transaction:
        - seeded history entry ("Order placed", actor = customer)
        - stock decremented by each line's quantity
        - dine-in table occupied by the new order

        Checks run in order: dish reference, dish availability, then line
        quantities and customization prices.

        Raises:
            ValidationError: empty order, non-positive quantity, negative customization price
            InvalidReferenceError: unknown dish/table/restaurant or one from another restaurant
            ItemUnavailableError: dish unavailable or out of stock
            TableUnavailableError: table not available or reserved
        """
        if not request.items:
            raise ValidationError("Order must contain at least one item")

        try:
            with atomic(self._db):
                order = self._place_order(customer_id, request)
        except IntegrityError as e:
            # Concurrent placement took the same daily sequence
            raise DatabaseError(
                "order creation",
                restaurant_id=request.restaurant_id,
                error=str(e.orig),
            ) from e

        logger.info(
            "Order placed",
            order_id=order.id,
            order_number=order.order_number,
            restaurant_id=order.restaurant_id,
            customer_id=mask_user_id(customer_id),
            order_type=order.order_type,
            item_count=len(request.items),
            total_cents=order.total_cents,
        )
        return order

    def _validate_items(self, items: list[OrderItemInput]) -> None:
        """Line checks that run once every dish has resolved and is orderable."""
        for item in items:
            if item.quantity < Limits.MIN_QUANTITY:
                raise ValidationError(
                    "Quantity must be a positive integer",
                    dish_id=item.dish_id,
                    quantity=item.quantity,
                )
            for customization in item.customizations:
                if customization.price_cents < 0:
                    raise ValidationError(
                        "Customization price cannot be negative",
                        dish_id=item.dish_id,
                        customization=customization.name,
                    )

    def _resolve_dishes(self, request: CreateOrderRequest) -> dict[int, Dish]:
        """Lock the requested dishes and check they can be ordered."""
        locked = self._dishes.find_by_ids_for_update([item.dish_id for item in request.items])
        dishes = {dish.id: dish for dish in locked}

        for item in request.items:
            dish = dishes.get(item.dish_id)
            if dish is None or not dish.is_active or dish.restaurant_id != request.restaurant_id:
                raise InvalidReferenceError(
                    "Dish", item.dish_id, restaurant_id=request.restaurant_id
                )
            if not dish.is_available:
                raise ItemUnavailableError(dish.name, dish_id=dish.id)
            if dish.is_out_of_stock or dish.stock_quantity == 0:
                raise ItemUnavailableError(dish.name, reason="out of stock", dish_id=dish.id)

        return dishes

    def _resolve_table(self, request: CreateOrderRequest) -> Table | None:
        if request.order_type != OrderType.DINE_IN.value or request.table_id is None:
            return None

        table = self._tables.find_by_id_for_update(request.table_id)
        if table is None or not table.is_active or table.restaurant_id != request.restaurant_id:
            raise InvalidReferenceError(
                "Table", request.table_id, restaurant_id=request.restaurant_id
            )
        return table

    def _next_order_number(self, restaurant_id: int, order_date) -> tuple[str, int]:
        sequence = self._orders.next_daily_sequence(restaurant_id, order_date)
        digits = settings.order_number_sequence_digits
        number = f"{settings.order_number_prefix}{order_date:%y%m%d}{sequence:0{digits}d}"
        return number, sequence

    def _place_order(self, customer_id: int, request: CreateOrderRequest) -> Order:
        dishes = self._resolve_dishes(request)
        self._validate_items(request.items)

        fees = self._fee_provider(request.restaurant_id)
        if fees is None:
            raise InvalidReferenceError("Restaurant", request.restaurant_id)

        table = self._resolve_table(request)

        order_items = []
        for item in request.items:
            dish = dishes[item.dish_id]
            order_items.append(
                OrderItem(
                    dish_id=dish.id,
                    name=dish.name,
                    unit_price_cents=dish.price_cents,
                    quantity=item.quantity,
                    customizations=[c.model_dump() for c in item.customizations],
                    special_instructions=item.special_instructions,
                    total_cents=line_total(dish.price_cents, item.quantity, item.customizations),
                )
            )

        totals = compute_totals(
            [line.total_cents for line in order_items],
            fees,
            request.order_type,
        )

        now = utcnow()
        order_number, sequence = self._next_order_number(request.restaurant_id, now.date())

        is_delivery = request.order_type == OrderType.DELIVERY.value
        order = Order(
            restaurant_id=request.restaurant_id,
            customer_id=customer_id,
            table_id=table.id if table else None,
            order_number=order_number,
            order_date=now.date(),
            daily_sequence=sequence,
            order_type=request.order_type,
            status=OrderStatus.PENDING.value,
            subtotal_cents=totals.subtotal_cents,
            tax_cents=totals.tax_cents,
            service_charge_cents=totals.service_charge_cents,
            delivery_fee_cents=totals.delivery_fee_cents,
            discount_cents=totals.discount_cents,
            total_cents=totals.total_cents,
            payment_method=request.payment_method,
            delivery_address=(
                request.delivery_address.model_dump()
                if is_delivery and request.delivery_address
                else None
            ),
            delivery_instructions=request.delivery_instructions if is_delivery else None,
            special_instructions=request.special_instructions,
            created_at=now,
        )
        order.items = order_items
        order.transition_to(OrderStatus.PENDING.value, customer_id, "Order placed")
        self._orders.save(order)

        for item in request.items:
            dishes[item.dish_id].adjust_stock(-item.quantity)

        if table is not None and not table.occupy(order.id):
            raise TableUnavailableError(
                table.table_number,
                table.status,
                table_id=table.id,
                restaurant_id=request.restaurant_id,
            )

        self._db.flush()
        return order

    # =========================================================================
    # Status changes
    # =========================================================================

    def _check_transition(self, order: Order, new_status: str) -> None:
        if not self._policy.allows(order.status, new_status, order.order_type):
            raise InvalidTransitionError(
                "Order",
                order.status,
                new_status,
                order_id=order.id,
                policy=self._policy.name,
            )

    def set_status(
        self,
        order_id: int,
        new_status: str,
        actor_id: int,
        notes: str | None = None,
    ) -> Order:
        """
        Move an order to new_status under the configured transition policy.

        Appends exactly one history entry. Never touches stock or tables;
        use cancel_order() to release them.
        """
        if new_status not in ORDER_STATUS_VALUES:
            raise ValidationError(f"Unknown order status '{new_status}'", order_id=order_id)

        with atomic(self._db):
            order = self._orders.find_by_id_for_update(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)

            previous = order.status
            self._check_transition(order, new_status)
            order.transition_to(new_status, actor_id, notes)

        logger.info(
            "Order status updated",
            order_id=order_id,
            from_status=previous,
            to_status=new_status,
            actor_id=mask_user_id(actor_id),
        )
        return order

    def cancel_order(self, order_id: int, actor_id: int, reason: str | None = None) -> Order:
        """
        Cancel an order and release what it holds.

        Stock is restored for every line whose dish still exists and a
        dine-in table is freed whatever its current status.

        Raises:
            OrderNotFoundError: unknown order
            InvalidTransitionError: order already delivered, completed, cancelled or rejected
        """
        with atomic(self._db):
            order = self._orders.find_by_id_for_update(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)

            if order.status in TERMINAL_STATUSES:
                raise InvalidTransitionError(
                    "Order", order.status, OrderStatus.CANCELLED.value, order_id=order_id
                )
            self._check_transition(order, OrderStatus.CANCELLED.value)

            dishes = {
                dish.id: dish
                for dish in self._dishes.find_by_ids_for_update(
                    [item.dish_id for item in order.items]
                )
            }

            order.transition_to(OrderStatus.CANCELLED.value, actor_id, reason)
            order.cancellation_reason = reason

            restored = 0
            for item in order.items:
                dish = dishes.get(item.dish_id)
                if dish is not None:
                    dish.adjust_stock(item.quantity)
                    restored += 1

            if order.order_type == OrderType.DINE_IN.value and order.table_id is not None:
                table = self._tables.find_by_id_for_update(order.table_id)
                if table is not None:
                    table.free()

        logger.info(
            "Order cancelled",
            order_id=order_id,
            actor_id=mask_user_id(actor_id),
            restored_lines=restored,
        )
        return order

    # =========================================================================
    # Reviews
    # =========================================================================

    def add_review(
        self,
        order_id: int,
        customer_id: int,
        rating: int,
        review: str | None = None,
    ) -> Order:
        """
        Record the customer's rating (1-5) and review of a completed order.

        Raises:
            ForbiddenError: caller is not the order's customer
            InvalidStateError: order is not completed
            ValidationError: rating out of range
        """
        with atomic(self._db):
            order = self._orders.find_by_id_for_update(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)

            if order.customer_id != customer_id:
                raise ForbiddenError(
                    "review this order",
                    order_id=order_id,
                    user_id=mask_user_id(customer_id),
                )

            if order.status != OrderStatus.COMPLETED.value:
                raise InvalidStateError(
                    "Order", order.status, [OrderStatus.COMPLETED.value], order_id=order_id
                )

            if not Limits.MIN_RATING <= rating <= Limits.MAX_RATING:
                raise ValidationError(
                    f"Rating must be between {Limits.MIN_RATING} and {Limits.MAX_RATING}",
                    rating=rating,
                )

            order.rating = rating
            order.review = review
            order.review_date = utcnow()

        logger.info("Order reviewed", order_id=order_id, rating=rating)
        return order


def _as_utc(value: datetime | None) -> datetime | None:
    """Stored timestamps are UTC; naive filter values are taken as UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)
