from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class ServiceOrderCreate(BaseModel):
    client_name: str | None = None
    location: str | None = None
    contact_name: str | None = None
    contact_phone: str | None = None
    problem_description: str | None = None
    service_description: str | None = None
    internal_notes: str | None = None
    status: str | None = None


class ServiceOrderUpdate(BaseModel):
    """Partial update body.

    Use ``model_dump(exclude_unset=True)``: a field left out of the JSON is not
    touched, a field sent as null is cleared.
    """

    client_name: str | None = None
    location: str | None = None
    contact_name: str | None = None
    contact_phone: str | None = None
    problem_description: str | None = None
    service_description: str | None = None
    internal_notes: str | None = None
    status: str | None = None


class ServiceOrderRead(BaseModel):
    id: str
    os_number: int
    technician_id: str
    status: str
    client_name: str
    location: str
    contact_name: str
    contact_phone: str
    problem_description: str
    service_description: str | None = None
    internal_notes: str | None = None
    start_datetime: datetime
    completion_datetime: datetime | None = None
    total_value: float | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ServiceOrderStats(BaseModel):
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0
    total: int = 0
