"""CRUD operations for technicians, clients, service orders and their records."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from sqlalchemy import select, delete, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from fieldservice.errors import StorageFailure
from fieldservice.models import (
    Technician, Client, ServiceOrder, OsNumber,
    OrderPhoto, ReplacedPart, OrderSignature,
)
from fieldservice.models.base import utcnow

logger = logging.getLogger(__name__)


@asynccontextmanager
async def atomic(db: AsyncSession, operation: str):
    """Commit once at the end of the block, or roll everything back."""
    try:
        yield
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Storage failure during %s", operation)
        raise StorageFailure() from exc


# ── Technician ────────────────────────────────────────────

async def create_technician(
    db: AsyncSession, email: str, password_hash: str, name: str, phone: str | None = None,
) -> Technician:
    tech = Technician(email=email, password_hash=password_hash, name=name, phone=phone)
    db.add(tech)
    await db.commit()
    await db.refresh(tech)
    return tech


async def get_technician(db: AsyncSession, technician_id: str) -> Technician | None:
    return await db.get(Technician, technician_id)


async def get_technician_by_email(db: AsyncSession, email: str) -> Technician | None:
    result = await db.execute(select(Technician).where(Technician.email == email))
    return result.scalars().first()


async def update_technician(db: AsyncSession, tech: Technician, **kwargs) -> Technician:
    for k, v in kwargs.items():
        setattr(tech, k, v)
    await db.commit()
    await db.refresh(tech)
    return tech


# ── Client ────────────────────────────────────────────────

async def create_client(db: AsyncSession, created_by: str | None, **fields) -> Client:
    client = Client(created_by=created_by, **fields)
    db.add(client)
    await db.commit()
    await db.refresh(client)
    return client


async def get_client(db: AsyncSession, client_id: str) -> Client | None:
    return await db.get(Client, client_id)


async def list_clients(db: AsyncSession, search: str | None = None) -> list[Client]:
    stmt = select(Client)
    if search:
        term = search.strip()
        stmt = stmt.where(
            or_(
                Client.name.icontains(term, autoescape=True),
                Client.email.icontains(term, autoescape=True),
                Client.phone.contains(term, autoescape=True),
            )
        )
    result = await db.execute(stmt.order_by(Client.name, Client.id))
    return list(result.scalars().all())


async def update_client(db: AsyncSession, client: Client, **kwargs) -> Client:
    for k, v in kwargs.items():
        setattr(client, k, v)
    client.updated_at = utcnow()
    await db.commit()
    await db.refresh(client)
    return client


async def delete_client(db: AsyncSession, client: Client) -> None:
    await db.delete(client)
    await db.commit()


# ── ServiceOrder ──────────────────────────────────────────

async def _allocate_os_number(db: AsyncSession) -> int:
    allocation = OsNumber()
    db.add(allocation)
    await db.flush()
    return allocation.number


async def create_service_order(db: AsyncSession, technician_id: str, status: str, **fields) -> ServiceOrder:
    """Insert an order together with its freshly allocated OS number."""
    async with atomic(db, "service order create"):
        number = await _allocate_os_number(db)
        now = utcnow()
        order = ServiceOrder(
            os_number=number,
            technician_id=technician_id,
            status=status,
            start_datetime=now,
            **fields,
        )
        db.add(order)
    await db.refresh(order)
    return order


async def get_service_order(db: AsyncSession, order_id: str, technician_id: str) -> ServiceOrder | None:
    """Fetch an order only if it belongs to the given technician."""
    result = await db.execute(
        select(ServiceOrder).where(
            ServiceOrder.id == order_id,
            ServiceOrder.technician_id == technician_id,
        )
    )
    return result.scalars().first()


async def list_service_orders(
    db: AsyncSession, technician_id: str, status: str | None = None,
) -> list[ServiceOrder]:
    stmt = select(ServiceOrder).where(ServiceOrder.technician_id == technician_id)
    if status:
        stmt = stmt.where(ServiceOrder.status == status)
    result = await db.execute(
        stmt.order_by(ServiceOrder.start_datetime.desc(), ServiceOrder.os_number.desc())
    )
    return list(result.scalars().all())


async def count_service_orders_by_status(db: AsyncSession, technician_id: str) -> dict[str, int]:
    result = await db.execute(
        select(ServiceOrder.status, func.count(ServiceOrder.id))
        .where(ServiceOrder.technician_id == technician_id)
        .group_by(ServiceOrder.status)
    )
    return {status: count for status, count in result.all()}


async def update_service_order(db: AsyncSession, order: ServiceOrder, **kwargs) -> ServiceOrder:
    for k, v in kwargs.items():
        setattr(order, k, v)
    order.updated_at = utcnow()
    await db.commit()
    await db.refresh(order)
    return order


async def delete_service_order(db: AsyncSession, order: ServiceOrder) -> None:
    """Delete an order and every record hanging off it in one transaction."""
    async with atomic(db, f"service order delete ({order.id})"):
        await db.execute(delete(OrderPhoto).where(OrderPhoto.order_id == order.id))
        await db.execute(delete(ReplacedPart).where(ReplacedPart.order_id == order.id))
        await db.execute(delete(OrderSignature).where(OrderSignature.order_id == order.id))
        await db.delete(order)


async def _recompute_total(db: AsyncSession, order: ServiceOrder) -> None:
    result = await db.execute(
        select(func.count(ReplacedPart.id), func.coalesce(func.sum(ReplacedPart.part_value), 0.0))
        .where(ReplacedPart.order_id == order.id)
    )
    count, total = result.one()
    order.total_value = round(float(total), 2) if count else None
    order.updated_at = utcnow()


# ── OrderPhoto ────────────────────────────────────────────

async def create_order_photo(
    db: AsyncSession,
    order_id: str,
    media_url: str,
    photo_type: str,
    media_type: str = "image",
    duration_seconds: int | None = None,
) -> OrderPhoto:
    photo = OrderPhoto(
        order_id=order_id, media_url=media_url, photo_type=photo_type,
        media_type=media_type, duration_seconds=duration_seconds,
    )
    db.add(photo)
    await db.commit()
    await db.refresh(photo)
    return photo


async def list_order_photos(
    db: AsyncSession, order_id: str, photo_type: str | None = None,
) -> list[OrderPhoto]:
    stmt = select(OrderPhoto).where(OrderPhoto.order_id == order_id)
    if photo_type:
        stmt = stmt.where(OrderPhoto.photo_type == photo_type)
    result = await db.execute(stmt.order_by(OrderPhoto.uploaded_at.desc(), OrderPhoto.id.desc()))
    return list(result.scalars().all())


async def get_order_photo(db: AsyncSession, order_id: str, photo_id: str) -> OrderPhoto | None:
    result = await db.execute(
        select(OrderPhoto).where(OrderPhoto.id == photo_id, OrderPhoto.order_id == order_id)
    )
    return result.scalars().first()


async def delete_order_photo(db: AsyncSession, photo: OrderPhoto) -> None:
    await db.delete(photo)
    await db.commit()


# ── ReplacedPart ──────────────────────────────────────────

async def create_replaced_part(
    db: AsyncSession,
    order: ServiceOrder,
    old_part: str,
    new_part: str,
    part_value: float | None = None,
) -> ReplacedPart:
    """Insert a part and refresh the order total in the same transaction."""
    part = ReplacedPart(order_id=order.id, old_part=old_part, new_part=new_part, part_value=part_value)
    async with atomic(db, f"replaced part add ({order.id})"):
        db.add(part)
        await db.flush()
        await _recompute_total(db, order)
    await db.refresh(part)
    await db.refresh(order)
    return part


async def list_replaced_parts(
    db: AsyncSession, order_id: str, newest_first: bool = True,
) -> list[ReplacedPart]:
    order_by = (
        (ReplacedPart.created_at.desc(), ReplacedPart.id.desc())
        if newest_first
        else (ReplacedPart.created_at, ReplacedPart.id)
    )
    result = await db.execute(
        select(ReplacedPart).where(ReplacedPart.order_id == order_id).order_by(*order_by)
    )
    return list(result.scalars().all())


async def get_replaced_part(db: AsyncSession, order_id: str, part_id: str) -> ReplacedPart | None:
    result = await db.execute(
        select(ReplacedPart).where(ReplacedPart.id == part_id, ReplacedPart.order_id == order_id)
    )
    return result.scalars().first()


async def delete_replaced_part(db: AsyncSession, order: ServiceOrder, part: ReplacedPart) -> None:
    async with atomic(db, f"replaced part delete ({order.id})"):
        await db.delete(part)
        await db.flush()
        await _recompute_total(db, order)
    await db.refresh(order)


# ── OrderSignature ────────────────────────────────────────

def _dialect_insert(db: AsyncSession):
    """Return the dialect-specific insert() that supports ON CONFLICT."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise StorageFailure(f"Signature upsert is not supported on the {dialect} database")
    return insert


async def get_order_signature(db: AsyncSession, order_id: str) -> OrderSignature | None:
    result = await db.execute(select(OrderSignature).where(OrderSignature.order_id == order_id))
    return result.scalars().first()


async def upsert_order_signature(db: AsyncSession, order_id: str, signature_data: str) -> OrderSignature:
    """Insert the order's signature or overwrite the existing one in a single statement."""
    insert = _dialect_insert(db)
    stmt = insert(OrderSignature).values(
        id=str(ULID()),
        created_at=utcnow(),
        order_id=order_id,
        signature_data=signature_data,
        signed_at=utcnow(),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[OrderSignature.order_id],
        set_={
            "signature_data": stmt.excluded.signature_data,
            "signed_at": stmt.excluded.signed_at,
        },
    )
    async with atomic(db, f"signature upsert ({order_id})"):
        await db.execute(stmt)
        result = await db.execute(
            select(OrderSignature)
            .where(OrderSignature.order_id == order_id)
            .execution_options(populate_existing=True)
        )
        signature = result.scalars().one()
    return signature
