"""Service order API. Every route only sees the caller's own orders."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.db.engine import get_db
from fieldservice.dependencies import require_auth
from fieldservice.schemas import (
    ServiceOrderCreate, ServiceOrderUpdate, ServiceOrderRead, ServiceOrderStats,
)
from fieldservice.services import orders
from fieldservice.services.auth import AuthContext

router = APIRouter(prefix="/api/service-orders", tags=["service_orders"])


@router.get("", response_model=list[ServiceOrderRead])
async def list_service_orders(
    status: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await orders.list_orders(db, auth, status=status)


@router.get("/stats", response_model=ServiceOrderStats)
async def service_order_stats(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await orders.order_stats(db, auth)


@router.post("", response_model=ServiceOrderRead, status_code=201)
async def create_service_order(
    body: ServiceOrderCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await orders.create_order(db, auth, body.model_dump())


@router.get("/{order_id}", response_model=ServiceOrderRead)
async def get_service_order(
    order_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await orders.get_order(db, auth, order_id)


@router.put("/{order_id}", response_model=ServiceOrderRead)
@router.patch("/{order_id}", response_model=ServiceOrderRead)
async def update_service_order(
    order_id: str,
    body: ServiceOrderUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await orders.update_order(db, auth, order_id, body.model_dump(exclude_unset=True))


@router.delete("/{order_id}")
async def delete_service_order(
    order_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await orders.delete_order(db, auth, order_id)
    return {"ok": True, "id": order_id}
