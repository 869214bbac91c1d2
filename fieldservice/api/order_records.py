"""Photos, replaced parts and signature, nested under a service order."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.db.engine import get_db
from fieldservice.dependencies import require_auth
from fieldservice.schemas import (
    OrderPhotoCreate, OrderPhotoRead,
    ReplacedPartCreate, ReplacedPartRead,
    SignatureUpsert, SignatureRead,
)
from fieldservice.services import order_records
from fieldservice.services.auth import AuthContext

router = APIRouter(prefix="/api/service-orders/{order_id}", tags=["order_records"])


# ── Photos ────────────────────────────────────────────────

@router.get("/photos", response_model=list[OrderPhotoRead])
async def list_photos(
    order_id: str,
    photo_type: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await order_records.list_photos(db, auth, order_id, photo_type=photo_type)


@router.post("/photos", response_model=OrderPhotoRead, status_code=201)
async def add_photo(
    order_id: str,
    body: OrderPhotoCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await order_records.add_photo(
        db, auth, order_id,
        media_url=body.media_url,
        photo_type=body.photo_type,
        media_type=body.media_type,
        duration_seconds=body.duration_seconds,
    )


@router.delete("/photos/{photo_id}")
async def delete_photo(
    order_id: str,
    photo_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await order_records.remove_photo(db, auth, order_id, photo_id)
    return {"ok": True, "id": photo_id}


# ── Replaced parts ────────────────────────────────────────

@router.get("/parts", response_model=list[ReplacedPartRead])
async def list_parts(
    order_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await order_records.list_parts(db, auth, order_id)


@router.post("/parts", response_model=ReplacedPartRead, status_code=201)
async def add_part(
    order_id: str,
    body: ReplacedPartCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await order_records.add_part(
        db, auth, order_id, body.old_part, body.new_part, body.part_value,
    )


@router.delete("/parts/{part_id}")
async def delete_part(
    order_id: str,
    part_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await order_records.remove_part(db, auth, order_id, part_id)
    return {"ok": True, "id": part_id}


# ── Signature ─────────────────────────────────────────────

@router.get("/signature", response_model=SignatureRead | None)
async def get_signature(
    order_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await order_records.get_signature(db, auth, order_id)


@router.post("/signature", response_model=SignatureRead)
@router.put("/signature", response_model=SignatureRead)
async def save_signature(
    order_id: str,
    body: SignatureUpsert,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await order_records.upsert_signature(db, auth, order_id, body.signature_data)
