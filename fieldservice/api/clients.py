"""Client directory API. Any authenticated technician may read and edit any client."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.db.engine import get_db
from fieldservice.dependencies import require_auth
from fieldservice.schemas import ClientCreate, ClientUpdate, ClientRead
from fieldservice.services import clients
from fieldservice.services.auth import AuthContext

router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.get("", response_model=list[ClientRead])
async def list_clients(
    search: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await clients.list_clients(db, auth, search=search)


@router.post("", response_model=ClientRead, status_code=201)
async def create_client(
    body: ClientCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await clients.create_client(db, auth, body.model_dump())


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(
    client_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await clients.get_client(db, auth, client_id)


@router.put("/{client_id}", response_model=ClientRead)
@router.patch("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: str,
    body: ClientUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await clients.update_client(db, auth, client_id, body.model_dump(exclude_unset=True))


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await clients.delete_client(db, auth, client_id)
    return {"ok": True, "id": client_id}
