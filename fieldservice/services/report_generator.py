"""Service report: fold an order and its records into one printable document."""

from __future__ import annotations

import io
import logging
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.config import get_settings
from fieldservice.db import crud
from fieldservice.errors import RenderFailure
from fieldservice.schemas import OrderPhotoRead, SignatureRead, ServiceReport
from fieldservice.schemas.report import (
    ReportHeader, ReportClientBlock, ReportTechnicianBlock, ReportPart,
)
from fieldservice.services.auth import AuthContext
from fieldservice.services.orders import get_order

logger = logging.getLogger(__name__)

_settings = get_settings()

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def _format_datetime(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y %H:%M")


def _format_currency(value: float | None) -> str:
    amount = f"{(value or 0):,.2f}"
    # 1,234.50 -> 1.234,50
    return "R$ " + amount.replace(",", "_").replace(".", ",").replace("_", ".")


_env = Environment(loader=FileSystemLoader(str(_TEMPLATE_DIR)), autoescape=True)
_env.filters["datetime"] = _format_datetime
_env.filters["currency"] = _format_currency


async def assemble(db: AsyncSession, auth: AuthContext, order_id: str) -> ServiceReport:
    """Build the report for one of the caller's orders. Reads only."""
    order = await get_order(db, auth, order_id)
    technician = await crud.get_technician(db, order.technician_id)
    photos = await crud.list_order_photos(db, order.id)
    parts = await crud.list_replaced_parts(db, order.id, newest_first=False)
    signature = await crud.get_order_signature(db, order.id)

    # Listed oldest first on paper
    media = sorted(photos, key=lambda p: (p.uploaded_at, p.id))

    return ServiceReport(
        header=ReportHeader(
            company_name=_settings.report.company_name,
            title="Relatório de Serviço",
            os_number=order.os_number,
            status=order.status,
        ),
        client=ReportClientBlock(
            client_name=order.client_name,
            location=order.location,
            contact_name=order.contact_name,
            contact_phone=order.contact_phone,
        ),
        technician=ReportTechnicianBlock(
            name=technician.name if technician else auth.name,
            email=technician.email if technician else auth.email,
            phone=technician.phone if technician else auth.phone,
        ),
        problem_description=order.problem_description,
        service_description=order.service_description,
        start_datetime=order.start_datetime,
        completion_datetime=order.completion_datetime,
        problem_media=[OrderPhotoRead.model_validate(p) for p in media if p.photo_type == "problem"],
        solution_media=[OrderPhotoRead.model_validate(p) for p in media if p.photo_type == "solution"],
        parts=[
            ReportPart(old_part=p.old_part, new_part=p.new_part, part_value=p.part_value)
            for p in parts
        ],
        parts_total=round(sum(p.part_value or 0 for p in parts), 2),
        total_value=order.total_value,
        signature=SignatureRead.model_validate(signature) if signature else None,
        generated_at=datetime.now(timezone.utc),
    )


def render_html(report: ServiceReport) -> str:
    template = _env.get_template("service_report.html.j2")
    return template.render(
        report=report,
        timezone_label=_settings.report.timezone_label,
    )


def render_pdf(report: ServiceReport) -> bytes:
    """Render the report HTML to PDF bytes."""
    from xhtml2pdf import pisa

    html = render_html(report)
    pdf_buffer = io.BytesIO()
    pisa_status = pisa.CreatePDF(io.StringIO(html), dest=pdf_buffer)
    if pisa_status.err:
        logger.error("PDF rendering failed for OS #%s", report.header.os_number)
        raise RenderFailure("PDF generation failed")
    return pdf_buffer.getvalue()
