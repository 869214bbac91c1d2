"""Photos/videos, replaced parts and the customer signature of a service order.

Every operation re-checks that the order belongs to the caller before touching
its records, even when the route already did.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.config import get_settings
from fieldservice.db import crud
from fieldservice.errors import NotFound, ValidationError
from fieldservice.models import OrderPhoto, ReplacedPart, OrderSignature
from fieldservice.services.auth import AuthContext
from fieldservice.services.orders import get_order

logger = logging.getLogger(__name__)

_settings = get_settings()

PHOTO_TYPES = ("problem", "solution")
MEDIA_TYPES = ("image", "video")


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


# ── Photos / videos ───────────────────────────────────────

async def list_photos(
    db: AsyncSession, auth: AuthContext, order_id: str, photo_type: str | None = None,
) -> list[OrderPhoto]:
    await get_order(db, auth, order_id)
    return await crud.list_order_photos(db, order_id, photo_type=photo_type)


async def add_photo(
    db: AsyncSession,
    auth: AuthContext,
    order_id: str,
    media_url: str | None,
    photo_type: str | None,
    media_type: str | None = None,
    duration_seconds: int | None = None,
) -> OrderPhoto:
    order = await get_order(db, auth, order_id)

    url = _text(media_url)
    if not url or not photo_type:
        raise ValidationError("media_url and photo_type are required")
    if photo_type not in PHOTO_TYPES:
        raise ValidationError("photo_type must be 'problem' or 'solution'")
    media_type = media_type or "image"
    if media_type not in MEDIA_TYPES:
        raise ValidationError("media_type must be 'image' or 'video'")

    if media_type == "video":
        max_seconds = _settings.media.max_video_seconds
        if duration_seconds is not None and duration_seconds < 0:
            raise ValidationError("duration_seconds cannot be negative")
        if duration_seconds is not None and duration_seconds > max_seconds:
            raise ValidationError(f"Videos must be at most {max_seconds} seconds long")
    else:
        duration_seconds = None

    photo = await crud.create_order_photo(
        db, order.id, media_url=url, photo_type=photo_type,
        media_type=media_type, duration_seconds=duration_seconds,
    )
    logger.info("Added %s %s to OS #%s", photo_type, media_type, order.os_number)
    return photo


async def remove_photo(db: AsyncSession, auth: AuthContext, order_id: str, photo_id: str) -> None:
    order = await get_order(db, auth, order_id)
    photo = await crud.get_order_photo(db, order.id, photo_id)
    if not photo:
        raise NotFound("Photo not found")
    await crud.delete_order_photo(db, photo)


# ── Replaced parts ────────────────────────────────────────

async def list_parts(db: AsyncSession, auth: AuthContext, order_id: str) -> list[ReplacedPart]:
    await get_order(db, auth, order_id)
    return await crud.list_replaced_parts(db, order_id)


async def add_part(
    db: AsyncSession,
    auth: AuthContext,
    order_id: str,
    old_part: str | None,
    new_part: str | None,
    part_value: float | None = None,
) -> ReplacedPart:
    order = await get_order(db, auth, order_id)

    old_part, new_part = _text(old_part), _text(new_part)
    if not old_part or not new_part:
        raise ValidationError("old_part and new_part are required")
    if part_value is not None and not math.isfinite(part_value):
        raise ValidationError("part_value must be a finite number")
    if part_value is not None and part_value < 0:
        raise ValidationError("part_value cannot be negative")

    return await crud.create_replaced_part(db, order, old_part, new_part, part_value)


async def remove_part(db: AsyncSession, auth: AuthContext, order_id: str, part_id: str) -> None:
    order = await get_order(db, auth, order_id)
    part = await crud.get_replaced_part(db, order.id, part_id)
    if not part:
        raise NotFound("Part not found")
    await crud.delete_replaced_part(db, order, part)


# ── Signature ─────────────────────────────────────────────

async def get_signature(db: AsyncSession, auth: AuthContext, order_id: str) -> OrderSignature | None:
    await get_order(db, auth, order_id)
    return await crud.get_order_signature(db, order_id)


async def upsert_signature(
    db: AsyncSession, auth: AuthContext, order_id: str, signature_data: str | None,
) -> OrderSignature:
    order = await get_order(db, auth, order_id)
    data = _text(signature_data)
    if not data:
        raise ValidationError("signature_data is required")
    signature = await crud.upsert_order_signature(db, order.id, data)
    logger.info("Signature saved for OS #%s", order.os_number)
    return signature
