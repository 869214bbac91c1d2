from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel

from fieldservice.schemas.order_records import OrderPhotoRead, SignatureRead


class ReportHeader(BaseModel):
    company_name: str
    title: str
    os_number: int
    status: str


class ReportClientBlock(BaseModel):
    client_name: str
    location: str
    contact_name: str
    contact_phone: str


class ReportTechnicianBlock(BaseModel):
    name: str
    email: str
    phone: str | None = None


class ReportPart(BaseModel):
    old_part: str
    new_part: str
    part_value: float | None = None


class ServiceReport(BaseModel):
    """Everything a printed service report shows, in one document."""

    header: ReportHeader
    client: ReportClientBlock
    technician: ReportTechnicianBlock
    problem_description: str
    service_description: str | None = None
    start_datetime: datetime
    completion_datetime: datetime | None = None
    problem_media: list[OrderPhotoRead] = []
    solution_media: list[OrderPhotoRead] = []
    parts: list[ReportPart] = []
    parts_total: float = 0.0
    total_value: float | None = None
    signature: SignatureRead | None = None
    generated_at: datetime
