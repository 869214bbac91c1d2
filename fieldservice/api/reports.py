from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.db.engine import get_db
from fieldservice.dependencies import require_auth
from fieldservice.schemas import ServiceReport
from fieldservice.services import report_generator
from fieldservice.services.auth import AuthContext

router = APIRouter(prefix="/api/service-orders/{order_id}", tags=["reports"])


@router.get("/report", response_model=ServiceReport)
async def get_report(
    order_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await report_generator.assemble(db, auth, order_id)


@router.get("/report.html", response_class=HTMLResponse)
async def get_report_html(
    order_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    report = await report_generator.assemble(db, auth, order_id)
    return HTMLResponse(content=report_generator.render_html(report))


@router.get("/report.pdf")
async def get_report_pdf(
    order_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    report = await report_generator.assemble(db, auth, order_id)
    pdf_bytes = report_generator.render_pdf(report)

    filename = f"os_{report.header.os_number}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
