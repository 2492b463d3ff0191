from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import hashlib
from portal.core.audit import audit_repo
from portal.db.store import TenantContext, store
from portal.schemas.audit import AuditLogEntry, AuditStatus
import logging
from typing import Callable

logger = logging.getLogger(__name__)

TENANT_HEADER = "X-Tenant-ID"
TENANT_COOKIE = "portal_org"

def resolve_tenant(request: Request) -> TenantContext:
    # Header first (API clients), then cookie (portal UI), then the process-wide active org
    org_id = request.headers.get(TENANT_HEADER) or request.cookies.get(TENANT_COOKIE)
    return TenantContext(org_id or store.active_org())

def action_type_for(endpoint: str, method: str) -> str:
    if endpoint.startswith("/payments"):
        return "PAYMENT"
    if endpoint.startswith("/payslips"):
        return "PAYSLIP"
    if endpoint.startswith("/collections"):
        return "COLLECTION_READ" if method == "GET" else "COLLECTION_WRITE"
    if endpoint.startswith("/health"):
        return "HEALTH_CHECK"
    return "UNKNOWN"

class AuditMiddleware(BaseHTTPMiddleware):
    # Reads of the audit trail itself are not audited.
    EXCLUDED_PREFIXES = ("/audit",)

    async def dispatch(self, request: Request, call_next: Callable):
        endpoint = request.url.path
        method = request.method

        tenant = resolve_tenant(request)
        request.state.tenant = tenant

        if endpoint.startswith(self.EXCLUDED_PREFIXES):
            return await call_next(request)

        # 1. Capture & Hash Input
        # Starlette caches the body, so the route still receives it downstream.
        input_hash = None
        try:
            input_hash = hashlib.sha256(await request.body()).hexdigest()
        except Exception as e:
            logger.warning(f"Request body unavailable for audit hash: {e}")

        # 2. Process Request
        status = AuditStatus.FAILURE
        output_hash = None
        try:
            response = await call_next(request)
            if 200 <= response.status_code < 300:
                status = AuditStatus.SUCCESS

            # 3. Capture & Hash Output
            response_body_bytes = b""
            async for chunk in response.body_iterator:
                response_body_bytes += chunk
            output_hash = hashlib.sha256(response_body_bytes).hexdigest()

            response = Response(
                content=response_body_bytes,
                status_code=response.status_code,
                headers=dict(response.headers),
                media_type=response.media_type
            )
        finally:
            # 4. Log Event
            try:
                audit_repo.save(AuditLogEntry(
                    endpoint=endpoint,
                    method=method,
                    action_type=action_type_for(endpoint, method),
                    tenant_id=tenant.org_id,
                    input_hash=input_hash,
                    output_hash=output_hash,
                    status=status
                ))
            except Exception as log_error:
                logger.error(f"Audit Logging Failed: {log_error}")

        return response
