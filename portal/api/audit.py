from fastapi import APIRouter, Depends
from typing import List
from portal.api.deps import get_tenant
from portal.core.audit import audit_repo
from portal.db.store import TenantContext
from portal.schemas.audit import AuditLogEntry

router = APIRouter()

@router.get("/audit", response_model=List[AuditLogEntry])
async def list_audit(tenant: TenantContext = Depends(get_tenant)):
    return audit_repo.get_all(tenant.org_id)
