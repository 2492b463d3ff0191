from fastapi import APIRouter, Body, Depends
from typing import Any, Dict, List
import logging
from portal.api.deps import get_collection, get_tenant
from portal.db.store import Collection, TenantContext, store

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/tenant")
async def get_tenant_info(tenant: TenantContext = Depends(get_tenant)):
    return {
        "org_id": tenant.org_id,
        "keys": {c.name: store.resolve_key(c, tenant) for c in Collection},
    }

@router.get("/collections/{collection}")
async def read_collection(
    collection: Collection = Depends(get_collection),
    tenant: TenantContext = Depends(get_tenant),
) -> List[Any]:
    return store.read(store.resolve_key(collection, tenant))

@router.put("/collections/{collection}")
async def replace_collection(
    records: List[Any] = Body(...),
    collection: Collection = Depends(get_collection),
    tenant: TenantContext = Depends(get_tenant),
):
    key = store.resolve_key(collection, tenant)
    store.write(key, records)
    logger.info(f"Collection replaced: {key} ({len(records)} records)")
    return {"key": key, "count": len(records)}

@router.post("/collections/{collection}")
async def append_record(
    record: Dict[str, Any] = Body(...),
    collection: Collection = Depends(get_collection),
    tenant: TenantContext = Depends(get_tenant),
):
    return store.append(store.resolve_key(collection, tenant), record)
