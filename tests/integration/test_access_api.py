from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from access.infrastructure.persistence.models import (
    AccountMembershipModel,
    AccountModel,
    MembershipRoleModel,
    RoleTemplateModel,
    SystemRoleAssignmentModel,
)
from access.main import create_app

pytestmark = pytest.mark.integration


def account(name, account_type="ORGANIZATION", parent=None, legacy_domains=None):
    return AccountModel(
        id=uuid4(),
        name=name,
        account_type=account_type,
        parent_id=parent.id if parent else None,
        legacy_domains=legacy_domains,
    )


def role(name, permissions=(), grants_all=False, applicable_to="both"):
    return RoleTemplateModel(
        id=uuid4(),
        name=name,
        permissions=list(permissions),
        grants_all=grants_all,
        applicable_to=applicable_to,
    )


def membership(user_id, acct, role_model, scope):
    return AccountMembershipModel(
        id=uuid4(),
        user_id=user_id,
        account_id=acct.id,
        roles=[MembershipRoleModel(id=uuid4(), role_id=role_model.id, scope=scope, position=0)],
    )


@pytest.fixture
def world(seed):
    acme = account("Acme", legacy_domains="acme-legacy.com, not a domain")
    eu = account("Acme EU", "SUBSIDIARY", parent=acme)
    berlin = account("Acme Berlin", "SUBSIDIARY", parent=eu)
    globex = account("Globex")
    admin = role("Super Admin", grants_all=True, applicable_to="system")
    viewer = role("Viewer", ["tickets:view"])
    manager = role("Regional Manager", ["accounts:edit", "users:edit"])
    admin_user, lead, regional = uuid4(), uuid4(), uuid4()
    admin_grant = SystemRoleAssignmentModel(id=uuid4(), user_id=admin_user, role_id=admin.id)

    seed(acme, eu, berlin, globex)
    seed(admin, viewer, manager)
    seed(
        admin_grant,
        membership(lead, eu, viewer, "subsidiary"),
        membership(regional, eu, manager, "subsidiary"),
    )
    return {
        "acme": acme, "eu": eu, "berlin": berlin, "globex": globex,
        "admin": admin, "viewer": viewer,
        "admin_user": admin_user, "lead": lead, "regional": regional, "admin_grant": admin_grant,
    }


@pytest.fixture
def client(settings, world):
    with TestClient(create_app(settings)) as c:
        yield c


def as_user(user_id):
    return {"X-User-ID": str(user_id)}


def check(client, user_id, permission, target=None):
    body = {"user_id": str(user_id), "permission": permission}
    if target is not None:
        body["target_account_id"] = str(target.id)
    return client.post("/access/permissions/check", json=body)


# ─── Permissions ────────────────────────────────────────────────────────────

def test_super_admin_check(client, world):
    r = check(client, world["admin_user"], "invoices:delete", world["globex"])
    assert r.status_code == 200
    assert r.json() == {"granted": True, "scope": "account"}


def test_subsidiary_grant_reaches_descendants_only(client, world):
    assert check(client, world["lead"], "tickets:view", world["berlin"]).json() == {
        "granted": True,
        "scope": "subsidiary",
    }
    assert check(client, world["lead"], "tickets:view", world["acme"]).json()["granted"] is False


def test_malformed_permission_is_rejected(client, world):
    r = check(client, world["lead"], "tickets view")
    assert r.status_code == 422
    assert r.json()["code"] == "invalid_permission"


def test_unknown_target_is_not_found(client, world):
    r = client.post("/access/permissions/check", json={
        "user_id": str(world["lead"]),
        "permission": "tickets:view",
        "target_account_id": str(uuid4()),
    })
    assert r.status_code == 404
    assert r.json()["code"] == "account_not_found"


def test_batch_check(client, world):
    r = client.post("/access/permissions/check-batch", json={"checks": [
        {"user_id": str(world["lead"]), "permission": "tickets:view", "target_account_id": str(world["eu"].id)},
        {"user_id": str(world["lead"]), "permission": "tickets:delete", "target_account_id": str(world["eu"].id)},
        {"user_id": str(world["admin_user"]), "permission": "settings:update"},
    ]})
    assert r.status_code == 200
    assert [(x["granted"], x["scope"]) for x in r.json()["results"]] == [
        (True, "subsidiary"),
        (False, "none"),
        (True, "account"),
    ]


def test_empty_batch_is_invalid(client):
    r = client.post("/access/permissions/check-batch", json={"checks": []})
    assert r.status_code == 422
    assert r.json()["code"] == "invalid_request"


def test_accessible_accounts(client, world):
    r = client.get(f"/access/users/{world['lead']}/accessible-accounts")
    assert set(r.json()["account_ids"]) == {str(world["eu"].id), str(world["berlin"].id)}


# ─── Domain mappings & resolution ───────────────────────────────────────────

def test_mapping_round_trip(client, world):
    admin = as_user(world["admin_user"])
    assert client.get("/access/domains/resolve", params={"address": "jane@acme.com"}).json()["resolution"] is None

    created = client.post("/access/domain-mappings", headers=admin, json={
        "domain": "Acme.com",
        "account_id": str(world["acme"].id),
        "priority": 1,
    })
    assert created.status_code == 201
    assert created.json()["domain"] == "acme.com"

    resolved = client.get("/access/domains/resolve", params={"address": "jane@support.acme.com"}).json()
    assert resolved["resolution"] == {
        "account_id": str(world["acme"].id),
        "domain": "acme.com",
        "priority": 1,
        "exact_match": False,
    }

    mapping_id = created.json()["id"]
    patched = client.patch(
        f"/access/domain-mappings/{mapping_id}",
        headers=admin,
        json={"account_id": str(world["globex"].id)},
    )
    assert patched.status_code == 200
    resolved = client.get("/access/domains/resolve", params={"address": "jane@acme.com"}).json()
    assert resolved["resolution"]["account_id"] == str(world["globex"].id)
    assert [m["domain"] for m in client.get("/access/domain-mappings", headers=admin).json()] == ["acme.com"]

    assert client.delete(f"/access/domain-mappings/{mapping_id}", headers=admin).status_code == 204
    assert client.get("/access/domains/resolve", params={"address": "jane@acme.com"}).json()["resolution"] is None
    assert client.delete(f"/access/domain-mappings/{mapping_id}", headers=admin).status_code == 404


def test_mapping_validation(client, world):
    admin = as_user(world["admin_user"])
    body = {"domain": "acme.com", "account_id": str(world["acme"].id)}
    assert client.post("/access/domain-mappings", headers=admin, json=body).status_code == 201

    duplicate = client.post("/access/domain-mappings", headers=admin, json={**body, "domain": "ACME.COM"})
    assert duplicate.status_code == 422
    assert duplicate.json()["code"] == "duplicate_domain"

    invalid = client.post("/access/domain-mappings", headers=admin, json={**body, "domain": "-bad-.com"})
    assert invalid.status_code == 422
    assert invalid.json()["code"] == "invalid_domain"


def test_mapping_writes_need_email_admin(client, world):
    body = {"domain": "acme.com", "account_id": str(world["acme"].id)}

    missing = client.post("/access/domain-mappings", json=body)
    assert missing.status_code == 401
    assert missing.json()["code"] == "unauthorized"

    denied = client.post("/access/domain-mappings", headers=as_user(world["lead"]), json=body)
    assert denied.status_code == 403
    assert denied.json()["code"] == "forbidden"
    assert client.post("/access/domain-mappings/import-legacy", headers=as_user(world["lead"])).status_code == 403
    assert client.post("/access/domains/cache/invalidate", headers=as_user(world["lead"])).status_code == 403


def test_import_legacy(client, world):
    admin = as_user(world["admin_user"])
    r = client.post("/access/domain-mappings/import-legacy", headers=admin)
    assert r.status_code == 200
    report = r.json()
    assert [i["domain"] for i in report["imported"]] == ["acme-legacy.com"]
    assert [(s["domain"], s["reason"]) for s in report["skipped"]] == [("not a domain", "invalid")]

    again = client.post("/access/domain-mappings/import-legacy", headers=admin).json()
    assert again["imported"] == []


def test_cache_endpoints_and_diagnostics(client, world):
    admin = as_user(world["admin_user"])
    client.post("/access/domain-mappings", headers=admin, json={
        "domain": "acme.com",
        "account_id": str(world["acme"].id),
    })
    diagnostics = client.get("/access/domains/test", params={"address": "bob@acme.com"}).json()
    assert diagnostics["domain"] == "acme.com"
    assert diagnostics["resolution"]["exact_match"] is True
    assert client.get("/access/domains/cache").json()["size"] == 1

    assert client.post("/access/domains/cache/invalidate", headers=admin).status_code == 204
    assert client.get("/access/domains/cache").json()["is_expired"] is True


# ─── Hierarchy & roles ──────────────────────────────────────────────────────

def test_reparent_into_own_descendant_is_a_conflict(client, world):
    r = client.patch(f"/access/accounts/{world['acme'].id}/parent", headers=as_user(world["admin_user"]), json={
        "parent_id": str(world["berlin"].id),
        "account_type": "SUBSIDIARY",
    })
    assert r.status_code == 409
    assert r.json()["code"] == "cycle"


def test_reparent_moves_the_account(client, world):
    r = client.patch(f"/access/accounts/{world['berlin'].id}/parent", headers=as_user(world["admin_user"]), json={
        "parent_id": str(world["globex"].id),
        "name": "Globex Berlin",
    })
    assert r.status_code == 200
    assert r.json()["parent_id"] == str(world["globex"].id)
    assert r.json()["name"] == "Globex Berlin"
    assert check(client, world["lead"], "tickets:view", world["berlin"]).json()["granted"] is False


def test_reparent_needs_account_edit_at_the_account(client, world):
    body = {"parent_id": str(world["eu"].id)}

    denied = client.patch(f"/access/accounts/{world['berlin'].id}/parent", headers=as_user(world["lead"]), json=body)
    assert denied.status_code == 403

    outside = client.patch(f"/access/accounts/{world['globex'].id}/parent", headers=as_user(world["regional"]), json={
        "parent_id": str(world["acme"].id),
    })
    assert outside.status_code == 403

    allowed = client.patch(
        f"/access/accounts/{world['berlin'].id}/parent",
        headers=as_user(world["regional"]),
        json={**body, "name": "Berlin Office"},
    )
    assert allowed.status_code == 200
    assert allowed.json()["name"] == "Berlin Office"

    assert client.patch(f"/access/accounts/{world['berlin'].id}/parent", json=body).status_code == 401


def test_last_super_admin_cannot_be_removed(client, world):
    admin = as_user(world["admin_user"])
    r = client.delete(f"/access/system-roles/{world['admin_grant'].id}", headers=admin)
    assert r.status_code == 409
    assert r.json()["code"] == "last_super_admin"

    other = client.post("/access/system-roles", headers=admin, json={
        "user_id": str(uuid4()),
        "role_id": str(world["admin"].id),
    })
    assert other.status_code == 201
    assert client.delete(f"/access/system-roles/{world['admin_grant'].id}", headers=admin).status_code == 204


def test_system_roles_are_managed_by_super_admins_only(client, world):
    grant_self = client.post("/access/system-roles", headers=as_user(world["regional"]), json={
        "user_id": str(world["regional"]),
        "role_id": str(world["admin"].id),
    })
    assert grant_self.status_code == 403
    assert grant_self.json()["code"] == "forbidden"

    remove = client.delete(f"/access/system-roles/{world['admin_grant'].id}", headers=as_user(world["regional"]))
    assert remove.status_code == 403

    r = check(client, world["regional"], "settings:update")
    assert r.json()["granted"] is False


def test_unknown_assignment_is_not_found(client, world):
    r = client.delete(f"/access/system-roles/{uuid4()}", headers=as_user(world["admin_user"]))
    assert r.status_code == 404
    assert r.json()["code"] == "assignment_not_found"


def test_assign_membership_role_and_by_email(client, world):
    admin = as_user(world["admin_user"])
    user = uuid4()
    r = client.post("/access/memberships/roles", headers=admin, json={
        "user_id": str(user),
        "account_id": str(world["globex"].id),
        "role_id": str(world["viewer"].id),
        "scope": "own",
    })
    assert r.status_code == 200
    assert r.json()["roles"] == [{"role_id": str(world["viewer"].id), "scope": "own"}]

    client.post("/access/domain-mappings", headers=admin, json={
        "domain": "globex.com",
        "account_id": str(world["globex"].id),
    })
    newcomer = uuid4()
    assigned = client.post("/access/memberships/assign-by-email", headers=admin, json={
        "user_id": str(newcomer),
        "email": "new@globex.com",
        "default_role_id": str(world["viewer"].id),
    }).json()
    assert assigned["assigned"] is True
    assert assigned["account_id"] == str(world["globex"].id)
    assert check(client, newcomer, "tickets:view", world["globex"]).json()["scope"] == "account"


def test_membership_roles_need_users_edit_at_the_account(client, world):
    body = {
        "user_id": str(uuid4()),
        "role_id": str(world["viewer"].id),
        "scope": "account",
    }
    inside = client.post("/access/memberships/roles", headers=as_user(world["regional"]), json={
        **body,
        "account_id": str(world["berlin"].id),
    })
    assert inside.status_code == 200

    outside = client.post("/access/memberships/roles", headers=as_user(world["regional"]), json={
        **body,
        "account_id": str(world["globex"].id),
    })
    assert outside.status_code == 403

    by_email = client.post("/access/memberships/assign-by-email", headers=as_user(world["regional"]), json={
        "user_id": str(uuid4()),
        "email": "someone@acme.com",
    })
    assert by_email.status_code == 403


# ─── Edge behaviour ─────────────────────────────────────────────────────────

def test_malformed_body_uses_error_contract(client):
    r = client.post("/access/permissions/check", json={"user_id": "not-a-uuid"}, headers={"X-Request-ID": "req-42"})
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "invalid_request"
    assert body["details"]["errors"]
    assert body["correlation_id"] == "req-42"


def test_request_id_is_echoed(client):
    r = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert r.status_code == 200
    assert r.headers["X-Request-ID"] == "abc-123"
    assert "X-Response-Time" in r.headers
