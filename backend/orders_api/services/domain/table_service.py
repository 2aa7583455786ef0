"""
Table Service - occupancy and housekeeping operations on dining tables.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.orm import Session

from shared.config.constants import Limits, TableStatus
from shared.config.logging import tables_logger as logger
from shared.infrastructure.db import atomic
from shared.utils.exceptions import InvalidStateError, TableNotFoundError
from orders_api.models import Table
from orders_api.repositories import TableFilters, TableRepository


class TableService:
    """
    Domain service for Table operations.

    Order placement and cancellation occupy and free tables through
    OrderService; these are the staff-facing operations.
    """

    def __init__(self, db: Session):
        self._db = db
        self._tables = TableRepository(db)

    def get_table(self, table_id: int) -> Table:
        table = self._tables.find_by_id(table_id, include_inactive=True)
        if table is None:
            raise TableNotFoundError(table_id)
        return table

    def _lock(self, table_id: int) -> Table:
        table = self._tables.find_by_id_for_update(table_id)
        if table is None:
            raise TableNotFoundError(table_id)
        return table

    def list_tables(self, restaurant_id: int, status: str | None = None) -> Sequence[Table]:
        filters = TableFilters(status=status, limit=Limits.MAX_PAGE_SIZE)
        return self._tables.find_all(restaurant_id, filters)

    def update_status(self, table_id: int, status: str) -> Table:
        """
        Direct status write. Any status other than "occupied" drops the
        current order reference.
        """
        with atomic(self._db):
            table = self._lock(table_id)
            previous = table.status
            table.set_status(status)

        logger.info(
            "Table status updated",
            table_id=table_id,
            from_status=previous,
            to_status=status,
        )
        return table

    def reserve_table(self, table_id: int) -> Table:
        """Reserve an available, active table."""
        with atomic(self._db):
            table = self._lock(table_id)
            if not table.is_active or not table.reserve():
                raise InvalidStateError(
                    "Table",
                    table.status,
                    [TableStatus.AVAILABLE.value],
                    table_id=table_id,
                )

        logger.info("Table reserved", table_id=table_id)
        return table

    def free_table(self, table_id: int) -> Table:
        with atomic(self._db):
            table = self._lock(table_id)
            released_order_id = table.current_order_id
            table.free()

        logger.info("Table freed", table_id=table_id, released_order_id=released_order_id)
        return table

    def mark_cleaned(self, table_id: int) -> Table:
        with atomic(self._db):
            table = self._lock(table_id).mark_cleaned()

        logger.info("Table cleaned", table_id=table_id)
        return table
