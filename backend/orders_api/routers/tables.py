"""
Tables router.
Listing plus the staff-facing occupancy primitives (status, reserve, free, clean).
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.config.constants import STAFF_ROLES
from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context, require_restaurant_access, require_roles
from shared.utils.schemas import TableOutput, TableStatus, TableStatusRequest
from orders_api.services.domain import TableService


router = APIRouter(prefix="/api/tables", tags=["tables"])


def _staff_service(db: Session, ctx: dict[str, Any], table_id: int) -> TableService:
    """Staff of the table's own restaurant only."""
    require_roles(ctx, STAFF_ROLES)
    service = TableService(db)
    require_restaurant_access(ctx, service.get_table(table_id).restaurant_id)
    return service


@router.get("", response_model=list[TableOutput])
def list_tables(
    restaurant_id: int = Query(...),
    status_filter: TableStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> list[TableOutput]:
    tables = TableService(db).list_tables(restaurant_id, status_filter)
    return [TableOutput.model_validate(t) for t in tables]


@router.put("/{table_id}/status", response_model=TableOutput)
def update_table_status(
    table_id: int,
    body: TableStatusRequest,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> TableOutput:
    """
    Overwrite a table's status.

    Any status other than "occupied" clears the table's current order.
    """
    service = _staff_service(db, ctx, table_id)
    return TableOutput.model_validate(service.update_status(table_id, body.status))


@router.put("/{table_id}/reserve", response_model=TableOutput)
def reserve_table(
    table_id: int,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> TableOutput:
    service = _staff_service(db, ctx, table_id)
    return TableOutput.model_validate(service.reserve_table(table_id))


@router.put("/{table_id}/free", response_model=TableOutput)
def free_table(
    table_id: int,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> TableOutput:
    service = _staff_service(db, ctx, table_id)
    return TableOutput.model_validate(service.free_table(table_id))


@router.put("/{table_id}/clean", response_model=TableOutput)
def mark_table_cleaned(
    table_id: int,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> TableOutput:
    service = _staff_service(db, ctx, table_id)
    return TableOutput.model_validate(service.mark_cleaned(table_id))
