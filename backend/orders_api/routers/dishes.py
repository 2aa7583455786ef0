"""
Dishes router.
Stock and availability endpoints for kitchen and management staff.
"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.config.constants import STAFF_ROLES
from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context, require_restaurant_access, require_roles
from shared.utils.schemas import AvailabilityRequest, DishOutput, StockUpdateRequest
from orders_api.services.domain import DishService


router = APIRouter(prefix="/api/dishes", tags=["dishes"])


@router.put("/{dish_id}/stock", response_model=DishOutput)
def update_stock(
    dish_id: int,
    body: StockUpdateRequest,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> DishOutput:
    """Add to, subtract from, or overwrite a dish's stock count."""
    require_roles(ctx, STAFF_ROLES)
    service = DishService(db)
    require_restaurant_access(ctx, service.get_dish(dish_id).restaurant_id)
    dish = service.update_stock(dish_id, body.quantity, body.operation)
    return DishOutput.model_validate(dish)


@router.put("/{dish_id}/availability", response_model=DishOutput)
def set_availability(
    dish_id: int,
    body: AvailabilityRequest,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> DishOutput:
    require_roles(ctx, STAFF_ROLES)
    service = DishService(db)
    require_restaurant_access(ctx, service.get_dish(dish_id).restaurant_id)
    dish = service.set_availability(dish_id, body.is_available)
    return DishOutput.model_validate(dish)


@router.get("/low-stock/{restaurant_id}", response_model=list[DishOutput])
def list_low_stock(
    restaurant_id: int,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> list[DishOutput]:
    require_roles(ctx, STAFF_ROLES)
    require_restaurant_access(ctx, restaurant_id)
    return [DishOutput.model_validate(d) for d in DishService(db).list_low_stock(restaurant_id)]


@router.get("/out-of-stock/{restaurant_id}", response_model=list[DishOutput])
def list_out_of_stock(
    restaurant_id: int,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> list[DishOutput]:
    require_roles(ctx, STAFF_ROLES)
    require_restaurant_access(ctx, restaurant_id)
    return [DishOutput.model_validate(d) for d in DishService(db).list_out_of_stock(restaurant_id)]
