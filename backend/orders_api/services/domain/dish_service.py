"""
Dish Service - stock and availability management for menu items.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.orm import Session

from shared.config.constants import StockOperation
from shared.config.logging import inventory_logger as logger
from shared.infrastructure.db import atomic
from shared.utils.exceptions import DishNotFoundError
from orders_api.models import Dish
from orders_api.repositories import DishRepository


class DishService:
    """Domain service for Dish stock operations."""

    def __init__(self, db: Session):
        self._db = db
        self._dishes = DishRepository(db)

    def get_dish(self, dish_id: int) -> Dish:
        dish = self._dishes.find_by_id(dish_id, include_inactive=True)
        if dish is None:
            raise DishNotFoundError(dish_id)
        return dish

    def _lock(self, dish_id: int) -> Dish:
        dish = self._dishes.find_by_id_for_update(dish_id)
        if dish is None:
            raise DishNotFoundError(dish_id)
        return dish

    def update_stock(self, dish_id: int, quantity: int, operation: str) -> Dish:
        """
        Manual stock correction.

        "add" and "subtract" go through Dish.adjust_stock (clamped at zero);
        "set" overwrites the count. Flags are recomputed either way.
        """
        with atomic(self._db):
            dish = self._lock(dish_id)
            previous = dish.stock_quantity

            if operation == StockOperation.ADD.value:
                dish.adjust_stock(quantity)
            elif operation == StockOperation.SUBTRACT.value:
                dish.adjust_stock(-quantity)
            else:
                dish.set_stock(quantity)

        logger.info(
            "Dish stock updated",
            dish_id=dish_id,
            operation=operation,
            quantity=quantity,
            previous=previous,
            current=dish.stock_quantity,
            is_low_stock=dish.is_low_stock,
        )
        return dish

    def set_availability(self, dish_id: int, is_available: bool) -> Dish:
        with atomic(self._db):
            dish = self._lock(dish_id)
            dish.is_available = is_available

        logger.info("Dish availability changed", dish_id=dish_id, is_available=is_available)
        return dish

    def list_low_stock(self, restaurant_id: int) -> Sequence[Dish]:
        return self._dishes.find_low_stock(restaurant_id)

    def list_out_of_stock(self, restaurant_id: int) -> Sequence[Dish]:
        return self._dishes.find_out_of_stock(restaurant_id)
