"""Service order lifecycle: creation, ownership-scoped access, status transitions."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.config import get_settings
from fieldservice.db import crud
from fieldservice.errors import NotFound, ValidationError
from fieldservice.models import ServiceOrder, OrderStatus
from fieldservice.models.base import utcnow
from fieldservice.services.auth import AuthContext

logger = logging.getLogger(__name__)

_settings = get_settings()

REQUIRED_FIELDS = ("client_name", "location", "contact_name", "contact_phone", "problem_description")
OPTIONAL_FIELDS = ("service_description", "internal_notes")
PATCHABLE_FIELDS = REQUIRED_FIELDS + OPTIONAL_FIELDS + ("status",)

# Moves allowed while terminal statuses are locked
TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    OrderStatus.PENDING: {OrderStatus.IN_PROGRESS, OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.IN_PROGRESS: {OrderStatus.PENDING, OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


def parse_status(value: Any) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(f"Invalid status. Expected one of: {allowed}")


def _clean_required(field: str, value: Any) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"{field} is required")
    return text


def _clean_optional(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def check_transition(current: OrderStatus, new: OrderStatus) -> None:
    if current == new or not _settings.orders.lock_terminal_status:
        return
    if new not in TRANSITIONS[current]:
        raise ValidationError(f"Cannot change status from '{current.value}' to '{new.value}'")


async def create_order(db: AsyncSession, auth: AuthContext, fields: dict[str, Any]) -> ServiceOrder:
    missing = [f for f in REQUIRED_FIELDS if not (isinstance(fields.get(f), str) and fields[f].strip())]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    status = parse_status(fields.get("status") or _settings.orders.default_status)
    values = {f: fields[f].strip() for f in REQUIRED_FIELDS}
    values.update({f: _clean_optional(fields.get(f)) for f in OPTIONAL_FIELDS})
    if status == OrderStatus.COMPLETED:
        values["completion_datetime"] = utcnow()

    order = await crud.create_service_order(db, technician_id=auth.technician_id, status=status.value, **values)
    logger.info("Service order OS #%s created by %s", order.os_number, auth.technician_id)
    return order


async def get_order(db: AsyncSession, auth: AuthContext, order_id: str) -> ServiceOrder:
    """Return the caller's order; someone else's order is reported as missing."""
    order = await crud.get_service_order(db, order_id, auth.technician_id)
    if not order:
        raise NotFound("Service order not found")
    return order


async def list_orders(db: AsyncSession, auth: AuthContext, status: str | None = None) -> list[ServiceOrder]:
    if status:
        status = parse_status(status).value
    return await crud.list_service_orders(db, auth.technician_id, status=status)


async def order_stats(db: AsyncSession, auth: AuthContext) -> dict[str, int]:
    counts = await crud.count_service_orders_by_status(db, auth.technician_id)
    stats = {
        "pending": counts.get(OrderStatus.PENDING.value, 0),
        "in_progress": counts.get(OrderStatus.IN_PROGRESS.value, 0),
        "completed": counts.get(OrderStatus.COMPLETED.value, 0),
        "cancelled": counts.get(OrderStatus.CANCELLED.value, 0),
    }
    stats["total"] = sum(counts.values())
    return stats


async def update_order(
    db: AsyncSession, auth: AuthContext, order_id: str, changes: dict[str, Any],
) -> ServiceOrder:
    """Apply a partial update.

    ``changes`` holds only the fields the caller sent; a key mapped to None means
    "clear this field", an absent key means "leave it alone".
    """
    unknown = set(changes) - set(PATCHABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    order = await get_order(db, auth, order_id)

    updates: dict[str, Any] = {}
    for field in REQUIRED_FIELDS:
        if field in changes:
            updates[field] = _clean_required(field, changes[field])
    for field in OPTIONAL_FIELDS:
        if field in changes:
            updates[field] = _clean_optional(changes[field])

    if "status" in changes:
        current = parse_status(order.status)
        new = parse_status(changes["status"])
        check_transition(current, new)
        updates["status"] = new.value
        if new == OrderStatus.COMPLETED and current != OrderStatus.COMPLETED:
            updates["completion_datetime"] = utcnow()
        elif current == OrderStatus.COMPLETED and new != OrderStatus.COMPLETED:
            updates["completion_datetime"] = None

    order = await crud.update_service_order(db, order, **updates)
    if "status" in updates:
        logger.info("Service order OS #%s is now %s", order.os_number, order.status)
    return order


async def delete_order(db: AsyncSession, auth: AuthContext, order_id: str) -> None:
    order = await get_order(db, auth, order_id)
    await crud.delete_service_order(db, order)
    logger.info("Service order %s deleted by %s", order_id, auth.technician_id)
