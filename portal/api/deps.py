from fastapi import HTTPException, Request
from portal.core.middleware import resolve_tenant
from portal.db.store import Collection, TenantContext, store

def get_tenant(request: Request) -> TenantContext:
    tenant = getattr(request.state, "tenant", None) or resolve_tenant(request)
    # First touch of a tenant namespace seeds its users; no-op afterwards.
    store.seed_default_users(tenant)
    return tenant

def get_collection(collection: str) -> Collection:
    try:
        return Collection(collection)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown collection '{collection}'")
