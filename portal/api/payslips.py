from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool
from typing import Optional
import io
import logging
from portal.api.deps import get_tenant
from portal.core.payslip import generate_payslip_pdf
from portal.db.store import TenantContext
from portal.schemas.payslip import Payslip

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/payslips/pdf")
async def download_payslip(
    payslip: Payslip,
    filename: Optional[str] = None,
    tenant: TenantContext = Depends(get_tenant),
):
    logger.info(f"Payslip requested for tenant {tenant.org_id}: {payslip.employee_name} ({payslip.period})")
    path = await run_in_threadpool(generate_payslip_pdf, payslip, filename)
    if path is None:
        raise HTTPException(status_code=503, detail="PDF generation unavailable.")

    pdf_bytes = path.read_bytes()
    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename={path.name}",
            "Content-Length": str(len(pdf_bytes))
        }
    )
