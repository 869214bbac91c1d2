"""Client directory. Shared by every authenticated technician (no ownership scoping)."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.db import crud
from fieldservice.errors import NotFound, ValidationError
from fieldservice.models import Client
from fieldservice.services.auth import AuthContext, EMAIL_RE

REQUIRED_FIELDS = ("name", "phone")
OPTIONAL_FIELDS = ("email", "address", "city", "state", "zip_code", "notes")


def _clean(fields: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for field in REQUIRED_FIELDS:
        if field in fields:
            value = fields[field].strip() if isinstance(fields[field], str) else ""
            if not value:
                raise ValidationError("Name and phone are required")
            cleaned[field] = value
    for field in OPTIONAL_FIELDS:
        if field in fields:
            value = fields[field]
            value = value.strip() if isinstance(value, str) else value
            cleaned[field] = value or None
    if cleaned.get("email"):
        cleaned["email"] = cleaned["email"].lower()
        if not EMAIL_RE.match(cleaned["email"]):
            raise ValidationError("Invalid email")
    return cleaned


async def list_clients(db: AsyncSession, auth: AuthContext, search: str | None = None) -> list[Client]:
    return await crud.list_clients(db, search=search)


async def get_client(db: AsyncSession, auth: AuthContext, client_id: str) -> Client:
    client = await crud.get_client(db, client_id)
    if not client:
        raise NotFound("Client not found")
    return client


async def create_client(db: AsyncSession, auth: AuthContext, fields: dict[str, Any]) -> Client:
    if any(not (isinstance(fields.get(f), str) and fields[f].strip()) for f in REQUIRED_FIELDS):
        raise ValidationError("Name and phone are required")
    return await crud.create_client(db, created_by=auth.technician_id, **_clean(fields))


async def update_client(
    db: AsyncSession, auth: AuthContext, client_id: str, changes: dict[str, Any],
) -> Client:
    client = await get_client(db, auth, client_id)
    return await crud.update_client(db, client, **_clean(changes))


async def delete_client(db: AsyncSession, auth: AuthContext, client_id: str) -> None:
    client = await get_client(db, auth, client_id)
    await crud.delete_client(db, client)
