"""
Table Repository - Data access for dining tables.
"""

from dataclasses import dataclass
from sqlalchemy import Select

from orders_api.models import Table
from .base import BaseRepository, RepositoryFilters


@dataclass
class TableFilters(RepositoryFilters):
    """Filters specific to tables."""

    status: str | None = None


class TableRepository(BaseRepository[Table]):
    """Repository for Table entities."""

    @property
    def model(self) -> type[Table]:
        return Table

    def _ordering(self) -> list:
        return [Table.table_number, Table.id]

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, TableFilters):
            filters = TableFilters(**filters.__dict__)

        if filters.status:
            query = query.where(Table.status == filters.status)

        return query
