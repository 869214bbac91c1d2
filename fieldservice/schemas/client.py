from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class ClientCreate(BaseModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    notes: str | None = None


class ClientUpdate(ClientCreate):
    """Same fields as ClientCreate; only the ones actually sent are applied."""


class ClientRead(BaseModel):
    id: str
    name: str
    phone: str
    email: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
