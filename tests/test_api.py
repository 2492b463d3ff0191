from fastapi import FastAPI
from fastapi.testclient import TestClient
from portal.main import app
from portal.api.collections import router as collections_router
from portal.core import payslip as payslip_module
from portal.core.audit import audit_repo
from portal.core.payments import simulator
from portal.db.store import store
from portal.schemas.audit import AuditStatus
import uuid

client = TestClient(app)

def new_tenant():
    return f"api-{uuid.uuid4().hex[:6]}"

async def no_sleep(seconds):
    return None

def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

def test_tenant_keys_from_header():
    tenant = new_tenant()
    response = client.get("/tenant", headers={"X-Tenant-ID": tenant})
    assert response.status_code == 200
    body = response.json()
    assert body["org_id"] == tenant
    assert body["keys"]["PAYMENTS_LOG"] == f"{tenant}_payments_log"

def test_tenant_defaults_to_active_org():
    response = client.get("/tenant")
    assert response.json()["org_id"] == store.active_org()

def test_append_then_read_collection():
    tenant = new_tenant()
    headers = {"X-Tenant-ID": tenant}
    response = client.post("/collections/payments_log", json={"amount": 500, "reference": "R1"}, headers=headers)
    assert response.status_code == 200
    assert response.json() == {"amount": 500, "reference": "R1"}

    response = client.get("/collections/payments_log", headers=headers)
    assert response.json() == [{"amount": 500, "reference": "R1"}]

    other = client.get("/collections/payments_log", headers={"X-Tenant-ID": new_tenant()})
    assert other.json() == []

def test_replace_collection():
    headers = {"X-Tenant-ID": new_tenant()}
    client.post("/collections/messages", json={"body": "old"}, headers=headers)
    response = client.put("/collections/messages", json=[{"body": "a"}, {"body": "b"}], headers=headers)
    assert response.json()["count"] == 2
    assert client.get("/collections/messages", headers=headers).json() == [{"body": "a"}, {"body": "b"}]

def test_unknown_collection_is_404():
    response = client.get("/collections/bogus", headers={"X-Tenant-ID": new_tenant()})
    assert response.status_code == 404

def test_first_request_seeds_users():
    headers = {"X-Tenant-ID": new_tenant()}
    users = client.get("/collections/users", headers=headers).json()
    assert sorted(u["role"] for u in users) == ["finance", "hr", "teacher"]

def test_simulate_payment_route_logs_outcome(monkeypatch):
    monkeypatch.setattr(simulator, "sleep", no_sleep)
    tenant = new_tenant()
    headers = {"X-Tenant-ID": tenant}
    payload = {"method": "momo", "account": "0244", "amount": 120, "reference": "PAY-1"}

    response = client.post("/payments/simulate", json=payload, headers=headers)
    assert response.status_code == 200
    outcome = response.json()
    assert outcome["provider"] == "momo"
    assert outcome["reference"] == "PAY-1"
    assert isinstance(outcome["success"], bool)

    log = client.get("/collections/payments_log", headers=headers).json()
    assert len(log) == 1
    assert log[0]["id"].startswith("pay_")
    assert log[0]["outcome"]["tx_id"] == outcome["tx_id"]

def test_payslip_download(tmp_path, monkeypatch):
    monkeypatch.setattr(payslip_module.settings, "PAYSLIP_DIR", str(tmp_path))
    payload = {"employee_name": "Kofi Boateng", "period": "2024-02", "gross": 2000, "tax": 200, "deductions": 50, "net": 1750}
    response = client.post("/payslips/pdf", json=payload, headers={"X-Tenant-ID": new_tenant()})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "Kofi_Boateng_payslip_2024-02.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")

def test_payslip_filename_cannot_leave_payslip_dir(tmp_path, monkeypatch):
    payslip_dir = tmp_path / "payslips"
    monkeypatch.setattr(payslip_module.settings, "PAYSLIP_DIR", str(payslip_dir))
    payload = {"employee_name": "Kofi", "period": "2024-02", "gross": 1, "tax": 0, "deductions": 0, "net": 1}
    response = client.post(
        "/payslips/pdf",
        params={"filename": "../escaped.pdf"},
        json=payload,
        headers={"X-Tenant-ID": new_tenant()},
    )
    assert response.status_code == 200
    assert (payslip_dir / "escaped.pdf").exists()
    assert not (tmp_path / "escaped.pdf").exists()

def test_simulate_payment_accepts_numeric_account(monkeypatch):
    monkeypatch.setattr(simulator, "sleep", no_sleep)
    payload = {"method": "momo", "account": 233244000000, "amount": -5, "reference": 42}
    response = client.post("/payments/simulate", json=payload, headers={"X-Tenant-ID": new_tenant()})
    assert response.status_code == 200
    assert response.json()["account"] == 233244000000
    assert response.json()["reference"] == 42

def test_payslip_unavailable_is_503(monkeypatch):
    monkeypatch.setattr(payslip_module.settings, "PDF_ENABLED", False)
    payload = {"employee_name": "Kofi", "period": "2024-02", "gross": 1, "tax": 0, "deductions": 0, "net": 1}
    response = client.post("/payslips/pdf", json=payload, headers={"X-Tenant-ID": new_tenant()})
    assert response.status_code == 503

def test_requests_are_audited_per_tenant():
    tenant = new_tenant()
    headers = {"X-Tenant-ID": tenant}
    client.post("/collections/teacher_notes", json={"text": "hi"}, headers=headers)
    client.get("/collections/bogus", headers=headers)

    entries = audit_repo.get_all(tenant)
    assert [e.action_type for e in entries] == ["COLLECTION_WRITE", "COLLECTION_READ"]
    assert entries[0].status == AuditStatus.SUCCESS
    assert entries[1].status == AuditStatus.FAILURE
    assert entries[0].input_hash is not None
    assert entries[0].output_hash is not None

    listed = client.get("/audit", headers=headers).json()
    assert len(listed) == 2
    assert all(e["tenant_id"] == tenant for e in listed)

def test_routes_work_without_middleware():
    bare = FastAPI()
    bare.include_router(collections_router)
    bare_client = TestClient(bare)
    tenant = new_tenant()
    response = bare_client.get("/tenant", headers={"X-Tenant-ID": tenant})
    assert response.json()["org_id"] == tenant
    assert audit_repo.get_all(tenant) == []

if __name__ == "__main__":
    test_health()
    test_append_then_read_collection()
    test_requests_are_audited_per_tenant()
    print("PASSED: api")
