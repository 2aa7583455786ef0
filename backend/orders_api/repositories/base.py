"""
Base Repository implementation.
Provides common data access patterns with restaurant isolation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TypeVar, Generic, Sequence
from sqlalchemy.orm import Session
from sqlalchemy import Select, select, func

from shared.config.constants import Limits


ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Base filters for repository queries."""

    # Pagination
    limit: int = Limits.DEFAULT_PAGE_SIZE
    offset: int = Limits.DEFAULT_OFFSET

    # Deactivated rows
    include_inactive: bool = False

    def __post_init__(self):
        """Validate and normalize filters."""
        self.limit = min(max(1, self.limit), Limits.MAX_PAGE_SIZE)
        self.offset = max(0, self.offset)


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Subclasses must implement:
    - model: Return the SQLAlchemy model class
    - _apply_filters(): Entity-specific WHERE clauses

    Subclasses may override:
    - _load_options(): Eager loading for read queries
    - _ordering(): ORDER BY for list queries
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @abstractmethod
    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply entity-specific filters to query."""
        ...

    def _load_options(self) -> list:
        return []

    def _ordering(self) -> list:
        return [self.model.id]

    def _scoped(self, restaurant_id: int | None, include_inactive: bool = False) -> Select:
        """Plain SELECT scoped to a restaurant (None means every restaurant)."""
        query = select(self.model)
        if restaurant_id is not None:
            query = query.where(self.model.restaurant_id == restaurant_id)
        if not include_inactive and hasattr(self.model, "is_active"):
            query = query.where(self.model.is_active.is_(True))
        return query

    def find_all(
        self,
        restaurant_id: int | None,
        filters: RepositoryFilters | None = None,
    ) -> Sequence[ModelT]:
        """
        Find all entities matching filters.

        Args:
            restaurant_id: Restaurant ID for isolation (None: all restaurants)
            filters: Optional filters

        Returns:
            List of entities
        """
        filters = filters or RepositoryFilters()
        query = self._scoped(restaurant_id, filters.include_inactive)
        query = self._apply_filters(query, filters)
        query = (
            query.options(*self._load_options())
            .order_by(*self._ordering())
            .offset(filters.offset)
            .limit(filters.limit)
        )
        return self._db.execute(query).scalars().unique().all()

    def count(
        self,
        restaurant_id: int | None,
        filters: RepositoryFilters | None = None,
    ) -> int:
        """Count entities matching filters (pagination ignored)."""
        filters = filters or RepositoryFilters()
        query = self._apply_filters(self._scoped(restaurant_id, filters.include_inactive), filters)
        return self._db.scalar(select(func.count()).select_from(query.subquery())) or 0

    def find_by_id(
        self,
        entity_id: int,
        restaurant_id: int | None = None,
        include_inactive: bool = False,
    ) -> ModelT | None:
        """
        Find entity by ID.

        Args:
            entity_id: Entity ID
            restaurant_id: Restaurant ID for isolation (None: any restaurant)
            include_inactive: Include deactivated entities

        Returns:
            Entity or None
        """
        query = (
            self._scoped(restaurant_id, include_inactive)
            .where(self.model.id == entity_id)
            .options(*self._load_options())
        )
        return self._db.scalar(query)

    def find_by_id_for_update(self, entity_id: int) -> ModelT | None:
        """
        Find entity by ID and lock its row until the transaction ends.

        No eager loading: FOR UPDATE cannot be applied to outer joins.
        Deactivated rows are returned so callers can tell them apart from
        unknown IDs.
        """
        query = select(self.model).where(self.model.id == entity_id).with_for_update()
        return self._db.scalar(query)

    def find_by_ids_for_update(self, entity_ids: list[int]) -> Sequence[ModelT]:
        """
        Lock several rows, always in ascending ID order so that concurrent
        writers acquire them in the same sequence.
        """
        if not entity_ids:
            return []

        query = (
            select(self.model)
            .where(self.model.id.in_(sorted(set(entity_ids))))
            .order_by(self.model.id)
            .with_for_update()
        )
        return self._db.execute(query).scalars().all()

    def save(self, entity: ModelT) -> ModelT:
        """
        Save entity (insert or update).

        Args:
            entity: Entity to save

        Returns:
            Saved entity
        """
        self._db.add(entity)
        self._db.flush()
        return entity
