from fastapi import APIRouter, Depends
import logging
from portal.api.deps import get_tenant
from portal.core.payments import simulate_payment
from portal.db.store import Collection, TenantContext, store
from portal.schemas.payment import PaymentOutcome, PaymentRecord, PaymentRequest

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/payments/simulate", response_model=PaymentOutcome)
async def simulate(request: PaymentRequest, tenant: TenantContext = Depends(get_tenant)):
    record = PaymentRecord(**request.model_dump())
    outcome = await simulate_payment(request)

    # The gateway never persists; this route is the caller that logs the result.
    entry = record.model_dump(mode="json")
    entry["outcome"] = outcome.model_dump(mode="json")
    store.append(store.resolve_key(Collection.PAYMENTS_LOG, tenant), entry)

    logger.info(f"Payment {record.id} logged for tenant {tenant.org_id}: success={outcome.success}")
    return outcome
