from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Type, TypeVar, Union
import json
import logging
import threading

from pydantic import BaseModel, ValidationError

from portal.core.config import settings
from portal.db.backends import KeyValueBackend, build_backend
from portal.schemas.user import default_users

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

class Collection(str, Enum):
    PENDING_PAYROLL = "payroll_pending"
    APPROVED_PAYROLL = "payroll_approved"
    ACCOUNTS = "payment_accounts"
    PAYMENTS_LOG = "payments_log"
    MESSAGES = "messages"
    AUDIT = "audit"
    TEACHER_ATTENDANCE = "teacher_attendance"
    TEACHER_TIMETABLE = "teacher_timetable"
    TEACHER_NOTES = "teacher_notes"
    USERS = "users"
    SALARY_SHEETS = "salary_sheets"

@dataclass(frozen=True)
class TenantContext:
    org_id: str

def _to_jsonable(record: Any) -> Any:
    if isinstance(record, BaseModel):
        return record.model_dump(mode="json")
    return record

class TenantStore:
    """
    Per-tenant collections over a flat key-value backend.

    Keys are "<org>_<collection suffix>". The org comes from an explicit
    TenantContext when given, otherwise from the process-wide active org.
    """

    def __init__(self, backend: KeyValueBackend, default_org: str = "FLAWLESS", active_org_key: str = "active_org"):
        self.backend = backend
        self.default_org = default_org
        self.active_org_key = active_org_key
        # Serializes read-modify-write within this process. Other processes
        # sharing a file backend are still last-write-wins.
        self._write_lock = threading.RLock()

    # Tenant accessor
    def active_org(self) -> str:
        return self.backend.get(self.active_org_key) or self.default_org

    def set_active_org(self, org_id: str) -> None:
        self.backend.set(self.active_org_key, org_id)
        logger.info(f"Active organization set to: {org_id}")

    def context(self, tenant: Optional[TenantContext] = None) -> TenantContext:
        return tenant if tenant is not None else TenantContext(self.active_org())

    def resolve_key(self, collection: Union[Collection, str], tenant: Optional[TenantContext] = None) -> str:
        suffix = collection.value if isinstance(collection, Collection) else collection
        return f"{self.context(tenant).org_id}_{suffix}"

    key = resolve_key

    # Collections
    def read(self, key: str) -> List[Any]:
        try:
            raw = self.backend.get(key)
            if raw is None:
                return []
            data = json.loads(raw)
        except ValueError as e:
            logger.debug(f"Discarding undecodable value at '{key}': {e}")
            return []
        if not isinstance(data, list):
            logger.debug(f"Discarding non-list value at '{key}' ({type(data).__name__})")
            return []
        return data

    def read_as(self, key: str, model: Type[M]) -> List[M]:
        records = []
        for index, item in enumerate(self.read(key)):
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                logger.debug(f"Skipping record {index} at '{key}' not matching {model.__name__}: {e.error_count()} errors")
        return records

    def write(self, key: str, records: List[Any]) -> None:
        payload = json.dumps([_to_jsonable(r) for r in records])
        with self._write_lock:
            self.backend.set(key, payload)

    def append(self, key: str, record: Any) -> Any:
        with self._write_lock:
            records = self.read(key)
            records.append(_to_jsonable(record))
            self.write(key, records)
        return record

    def seed_default_users(self, tenant: Optional[TenantContext] = None) -> None:
        key = self.resolve_key(Collection.USERS, tenant)
        with self._write_lock:
            if self.backend.exists(key):
                return
            self.write(key, default_users())
        logger.info(f"Seeded default users at '{key}'")

# Global Accessor
store = TenantStore(
    build_backend(settings),
    default_org=settings.DEFAULT_ORG,
    active_org_key=settings.ACTIVE_ORG_KEY,
)
