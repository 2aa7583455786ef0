"""
Orders router.
Thin controller over OrderService: placement, status changes,
cancellation, reviews and listings.
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.config.constants import STAFF_ROLES, Roles
from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context, require_restaurant_access, require_roles
from shared.utils.exceptions import ForbiddenError
from shared.utils.schemas import (
    CancelOrderRequest,
    CreateOrderRequest,
    OrderListOutput,
    OrderOutput,
    OrderStatus,
    OrderType,
    ReviewRequest,
    UpdateOrderStatusRequest,
)
from orders_api.routers._common.pagination import Pagination, get_pagination
from orders_api.models import Order
from orders_api.services.domain import OrderService


router = APIRouter(prefix="/api/orders", tags=["orders"])


def _authorize_order(ctx: dict[str, Any], order: Order, action: str) -> None:
    """Staff of the order's restaurant, or the customer who placed it."""
    if ctx["role"] in STAFF_ROLES:
        require_restaurant_access(ctx, order.restaurant_id)
    elif order.customer_id != ctx["user_id"]:
        raise ForbiddenError(action, order_id=order.id)


@router.post("", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
def create_order(
    body: CreateOrderRequest,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> OrderOutput:
    """
    Place an order for the authenticated user.

    Prices come from the menu, never from the request. Stock is reserved
    and a dine-in table is occupied in the same transaction.
    """
    order = OrderService(db).create_order(ctx["user_id"], body)
    return OrderOutput.model_validate(order)


@router.get("", response_model=OrderListOutput)
def list_orders(
    restaurant_id: int | None = Query(default=None),
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    order_type: OrderType | None = Query(default=None),
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> OrderListOutput:
    """
    List orders newest first.

    Customers only see their own orders; staff only their restaurant's.
    """
    customer_id = None
    if ctx["role"] not in STAFF_ROLES:
        customer_id = ctx["user_id"]
    elif ctx["role"] != Roles.SUPER_ADMIN:
        # Staff default to, and are limited to, their own restaurant
        if restaurant_id is None:
            restaurant_id = ctx.get("restaurant_id")
        if restaurant_id is None:
            raise ForbiddenError("list orders across restaurants")
        restaurant_id = int(restaurant_id)
        require_restaurant_access(ctx, restaurant_id)

    orders, total = OrderService(db).list_orders(
        restaurant_id=restaurant_id,
        status=status_filter,
        order_type=order_type,
        start_date=start_date,
        end_date=end_date,
        customer_id=customer_id,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return OrderListOutput(
        items=[OrderOutput.model_validate(order) for order in orders],
        pagination=pagination.to_dict(total=total),
    )


@router.get("/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> OrderOutput:
    order = OrderService(db).get_order(order_id)
    _authorize_order(ctx, order, "view this order")
    return OrderOutput.model_validate(order)


@router.put("/{order_id}/status", response_model=OrderOutput)
def update_order_status(
    order_id: int,
    body: UpdateOrderStatusRequest,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> OrderOutput:
    """
    Set an order's status (staff only).

    Does not release stock or tables; use the cancel endpoint for that.
    """
    require_roles(ctx, STAFF_ROLES)
    service = OrderService(db)
    _authorize_order(ctx, service.get_order(order_id), "update this order")
    order = service.set_status(order_id, body.status, ctx["user_id"], body.notes)
    return OrderOutput.model_validate(order)


@router.put("/{order_id}/cancel", response_model=OrderOutput)
def cancel_order(
    order_id: int,
    body: CancelOrderRequest | None = None,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> OrderOutput:
    """Cancel an order, restoring stock and freeing its table."""
    service = OrderService(db)
    _authorize_order(ctx, service.get_order(order_id), "cancel this order")
    reason = body.reason if body else None
    order = service.cancel_order(order_id, ctx["user_id"], reason)
    return OrderOutput.model_validate(order)


@router.post("/{order_id}/review", response_model=OrderOutput)
def add_review(
    order_id: int,
    body: ReviewRequest,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> OrderOutput:
    """Rate a completed order. Only the ordering customer may review it."""
    order = OrderService(db).add_review(order_id, ctx["user_id"], body.rating, body.review)
    return OrderOutput.model_validate(order)
