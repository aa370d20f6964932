from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from access.main import create_app


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


def assert_problem(data: dict, code: str):
    assert {"code", "message"} <= set(data.keys()) <= {"code", "message", "details", "correlation_id"}
    assert data["code"] == code
    assert isinstance(data["message"], str) and data["message"]


def test_not_found_contract(client: TestClient):
    account_id = uuid4()
    r = client.post("/access/permissions/check", json={
        "user_id": str(uuid4()),
        "permission": "tickets:view",
        "target_account_id": str(account_id),
    })
    assert r.status_code == 404
    data = r.json()
    assert_problem(data, "account_not_found")
    assert data["details"] == {"account_id": str(account_id)}


def test_unauthorized_contract(client: TestClient):
    r = client.delete(f"/access/domain-mappings/{uuid4()}")
    assert r.status_code == 401
    assert_problem(r.json(), "unauthorized")


def test_forbidden_contract(client: TestClient):
    r = client.delete(f"/access/system-roles/{uuid4()}", headers={"X-User-ID": str(uuid4())})
    assert r.status_code == 403
    assert_problem(r.json(), "forbidden")


def test_validation_contract(client: TestClient):
    r = client.post("/access/permissions/check", json={"permission": "tickets:view"})
    assert r.status_code == 422
    assert_problem(r.json(), "invalid_request")


def test_domain_validation_contract(client: TestClient):
    r = client.post("/access/permissions/check", json={"user_id": str(uuid4()), "permission": "a:b:c"})
    assert r.status_code == 422
    assert_problem(r.json(), "invalid_permission")
