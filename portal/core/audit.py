from abc import ABC, abstractmethod
from typing import List
from portal.db.store import Collection, TenantContext, TenantStore, store
from portal.schemas.audit import AuditLogEntry
import logging

logger = logging.getLogger(__name__)

class AuditRepository(ABC):
    @abstractmethod
    def save(self, entry: AuditLogEntry):
        pass

    @abstractmethod
    def get_all(self, tenant_id: str) -> List[AuditLogEntry]:
        pass

class StoreAuditRepository(AuditRepository):
    """Append-only audit trail kept in each tenant's Audit collection."""

    def __init__(self, tenant_store: TenantStore):
        self._store = tenant_store

    def _key(self, tenant_id: str) -> str:
        return self._store.resolve_key(Collection.AUDIT, TenantContext(tenant_id))

    def save(self, entry: AuditLogEntry):
        self._store.append(self._key(entry.tenant_id), entry)
        logger.info(f"Audit Logged: {entry.model_dump_json()}")

    def get_all(self, tenant_id: str) -> List[AuditLogEntry]:
        return self._store.read_as(self._key(tenant_id), AuditLogEntry)

# Global Accessor
audit_repo = StoreAuditRepository(store)
