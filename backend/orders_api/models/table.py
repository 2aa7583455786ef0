"""
Table Model: physical dining table and its occupancy state.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import OCCUPIABLE_TABLE_STATUSES, TableStatus
from .base import AuditMixin, Base, BigIntPK, utcnow

if TYPE_CHECKING:
    from .restaurant import Restaurant


class Table(AuditMixin, Base):
    """
    Physical table in a restaurant.
    Inherits: is_active, created_at, updated_at from AuditMixin.

    current_order_id is set only while status is "occupied". It is a plain
    column rather than a foreign key because orders reference tables too.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "restaurant_table"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    table_number: Mapped[str] = mapped_column(Text, nullable=False)  # "4", "T-12"
    capacity: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    status: Mapped[str] = mapped_column(
        Text, default=TableStatus.AVAILABLE.value, nullable=False, index=True
    )
    current_order_id: Mapped[Optional[int]] = mapped_column(BigInteger, index=True)
    last_cleaned_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint("restaurant_id", "table_number", name="uq_table_restaurant_number"),
        CheckConstraint("capacity >= 1 AND capacity <= 20", name="chk_table_capacity"),
        Index("ix_table_restaurant_status", "restaurant_id", "status"),
    )

    # Relationships
    restaurant: Mapped["Restaurant"] = relationship(back_populates="tables")

    def is_available(self) -> bool:
        return self.status in OCCUPIABLE_TABLE_STATUSES

    def occupy(self, order_id: int) -> bool:
        """
        Seat an order at this table.

        Returns False (and changes nothing) unless the table is available
        or reserved.
        """
        if not self.is_available():
            return False
        self.status = TableStatus.OCCUPIED.value
        self.current_order_id = order_id
        return True

    def free(self) -> "Table":
        """Release the table. Idempotent."""
        self.status = TableStatus.AVAILABLE.value
        self.current_order_id = None
        return self

    def reserve(self) -> bool:
        """Reserve the table. Only an available table can be reserved."""
        if self.status != TableStatus.AVAILABLE.value:
            return False
        self.status = TableStatus.RESERVED.value
        return True

    def set_status(self, new_status: str) -> "Table":
        """
        Direct status write for staff.

        Any status other than "occupied" clears current_order_id.
        """
        self.status = new_status
        if new_status != TableStatus.OCCUPIED.value:
            self.current_order_id = None
        return self

    def mark_cleaned(self) -> "Table":
        self.last_cleaned_at = utcnow()
        return self

    def __repr__(self) -> str:
        return f"<Table(id={self.id}, number='{self.table_number}', status={self.status})>"
