from uuid import uuid4

import pytest

from access.application.services.permission_engine import PermissionEngine
from access.application.services.role_catalog import RoleCatalog
from access.domain.entities.account import AccountType
from access.domain.entities.system_role_assignment import SystemRoleAssignment
from access.domain.exceptions import AccountNotFoundError, InvalidPermissionError, RoleNotFoundError
from access.domain.value_objects.decision import PermissionRequest
from access.domain.value_objects.permission import Permission
from access.domain.value_objects.scope import PermissionScope
from fakes import FakeUnitOfWork, make_account, make_membership, make_role

OWN, ACCOUNT, SUBSIDIARY, NONE = (
    PermissionScope.OWN,
    PermissionScope.ACCOUNT,
    PermissionScope.SUBSIDIARY,
    PermissionScope.NONE,
)


@pytest.fixture
def world():
    acme = make_account("Acme")
    eu = make_account("Acme EU", AccountType.SUBSIDIARY, parent=acme)
    berlin = make_account("Acme Berlin", AccountType.SUBSIDIARY, parent=eu)
    us = make_account("Acme US", AccountType.SUBSIDIARY, parent=acme)
    other = make_account("Globex")

    roles = {
        "admin": make_role("Super Admin", grants_all=True),
        "support": make_role("Support Lead", ["tickets:view", "tickets:update"]),
        "viewer": make_role("Viewer", ["tickets:view"]),
        "billing": make_role("Billing", ["invoices:view"]),
        "manager": make_role("Account Manager", grants_all=True),
    }
    uow = FakeUnitOfWork(accounts=[acme, eu, berlin, us, other], roles=roles.values())
    return {
        "uow": uow,
        "roles": roles,
        "acme": acme,
        "eu": eu,
        "berlin": berlin,
        "us": us,
        "other": other,
    }


def engine_for(uow: FakeUnitOfWork) -> PermissionEngine:
    return PermissionEngine(RoleCatalog(uow.roles), uow.system_roles, uow.memberships, uow.accounts)


async def grant_system(uow, user_id, role):
    await uow.system_roles.add(SystemRoleAssignment(id=uuid4(), user_id=user_id, role_id=role.id))


@pytest.mark.asyncio
async def test_super_admin_is_granted_everything(world):
    uow, user = world["uow"], uuid4()
    await grant_system(uow, user, world["roles"]["admin"])
    engine = engine_for(uow)

    for resource, action, target in [
        ("tickets", "view", None),
        ("invoices", "delete", world["berlin"].id),
        ("settings", "update", world["other"].id),
    ]:
        decision = await engine.check(user, resource, action, target)
        assert decision.granted
        assert decision.scope == ACCOUNT


@pytest.mark.asyncio
async def test_system_role_permission_grants_account_scope(world):
    uow, user = world["uow"], uuid4()
    await grant_system(uow, user, world["roles"]["support"])
    engine = engine_for(uow)

    decision = await engine.check(user, "tickets", "update")
    assert decision.granted and decision.scope == ACCOUNT
    assert not (await engine.check(user, "invoices", "view")).granted


@pytest.mark.asyncio
async def test_role_at_target_returns_its_scope(world):
    uow, user = world["uow"], uuid4()
    await uow.memberships.add(make_membership(user, world["eu"], (world["roles"]["viewer"], OWN)))
    engine = engine_for(uow)

    decision = await engine.check(user, "tickets", "view", world["eu"].id)
    assert decision.granted and decision.scope == OWN
    assert not (await engine.check(user, "tickets", "update", world["eu"].id)).granted


@pytest.mark.asyncio
async def test_membership_roles_need_a_target(world):
    uow, user = world["uow"], uuid4()
    await uow.memberships.add(make_membership(user, world["eu"], (world["roles"]["viewer"], ACCOUNT)))
    decision = await engine_for(uow).check(user, "tickets", "view")
    assert not decision.granted
    assert decision.scope == NONE


@pytest.mark.asyncio
async def test_subsidiary_role_covers_exactly_the_descendants(world):
    uow, user = world["uow"], uuid4()
    await uow.memberships.add(make_membership(user, world["acme"], (world["roles"]["viewer"], SUBSIDIARY)))
    engine = engine_for(uow)

    for name in ("eu", "berlin", "us"):
        decision = await engine.check(user, "tickets", "view", world[name].id)
        assert decision.granted, name
        assert decision.scope == SUBSIDIARY

    outside = await engine.check(user, "tickets", "view", world["other"].id)
    assert not outside.granted


@pytest.mark.asyncio
async def test_subsidiary_role_does_not_reach_upwards(world):
    uow, user = world["uow"], uuid4()
    await uow.memberships.add(make_membership(user, world["eu"], (world["roles"]["viewer"], SUBSIDIARY)))
    engine = engine_for(uow)

    assert (await engine.check(user, "tickets", "view", world["berlin"].id)).granted
    assert not (await engine.check(user, "tickets", "view", world["acme"].id)).granted
    assert not (await engine.check(user, "tickets", "view", world["us"].id)).granted


@pytest.mark.asyncio
async def test_account_scoped_role_is_not_inherited(world):
    uow, user = world["uow"], uuid4()
    await uow.memberships.add(make_membership(user, world["acme"], (world["roles"]["viewer"], ACCOUNT)))
    assert not (await engine_for(uow).check(user, "tickets", "view", world["eu"].id)).granted


@pytest.mark.asyncio
async def test_direct_grant_beats_inherited_grant(world):
    uow, user = world["uow"], uuid4()
    await uow.memberships.add(make_membership(user, world["acme"], (world["roles"]["viewer"], SUBSIDIARY)))
    await uow.memberships.add(make_membership(user, world["eu"], (world["roles"]["viewer"], OWN)))
    decision = await engine_for(uow).check(user, "tickets", "view", world["eu"].id)
    assert decision.scope == OWN


@pytest.mark.asyncio
async def test_first_matching_role_at_target_wins(world):
    uow, user = world["uow"], uuid4()
    await uow.memberships.add(make_membership(
        user,
        world["eu"],
        (world["roles"]["support"], ACCOUNT),
        (world["roles"]["viewer"], OWN),
    ))
    decision = await engine_for(uow).check(user, "tickets", "view", world["eu"].id)
    assert decision.scope == ACCOUNT


@pytest.mark.asyncio
async def test_grants_all_membership_role_matches_at_its_scope(world):
    uow, user = world["uow"], uuid4()
    await uow.memberships.add(make_membership(user, world["eu"], (world["roles"]["manager"], SUBSIDIARY)))
    engine = engine_for(uow)

    assert (await engine.check(user, "invoices", "delete", world["berlin"].id)).scope == SUBSIDIARY
    assert not (await engine.check(user, "invoices", "delete")).granted


@pytest.mark.asyncio
async def test_user_without_roles_is_denied(world):
    decision = await engine_for(world["uow"]).check(uuid4(), "tickets", "view", world["acme"].id)
    assert not decision.granted
    assert decision.scope == NONE


@pytest.mark.asyncio
async def test_unknown_target_raises(world):
    with pytest.raises(AccountNotFoundError):
        await engine_for(world["uow"]).check(uuid4(), "tickets", "view", uuid4())


@pytest.mark.asyncio
async def test_dangling_role_reference_raises(world):
    uow, user = world["uow"], uuid4()
    await uow.system_roles.add(SystemRoleAssignment(id=uuid4(), user_id=user, role_id=uuid4()))
    with pytest.raises(RoleNotFoundError):
        await engine_for(uow).check(user, "tickets", "view")


@pytest.mark.asyncio
async def test_malformed_permission_raises(world):
    with pytest.raises(InvalidPermissionError):
        await engine_for(world["uow"]).check(uuid4(), "tickets view", "")


@pytest.mark.asyncio
async def test_tree_is_loaded_only_for_subsidiary_candidates(world):
    uow, user = world["uow"], uuid4()
    await uow.memberships.add(make_membership(user, world["eu"], (world["roles"]["viewer"], ACCOUNT)))
    engine = engine_for(uow)

    await engine.check(user, "tickets", "view", world["eu"].id)
    assert uow.accounts.list_all_calls == 0


@pytest.mark.asyncio
async def test_batch_matches_individual_checks(world):
    uow = world["uow"]
    alice, bob = uuid4(), uuid4()
    await uow.memberships.add(make_membership(alice, world["acme"], (world["roles"]["viewer"], SUBSIDIARY)))
    await grant_system(uow, bob, world["roles"]["billing"])

    requests = [
        PermissionRequest(alice, Permission("tickets", "view"), world["berlin"].id),
        PermissionRequest(bob, Permission("invoices", "view")),
        PermissionRequest(alice, Permission("invoices", "view"), world["acme"].id),
        PermissionRequest(bob, Permission("tickets", "view"), world["other"].id),
    ]
    batch = await engine_for(uow).check_batch(requests)

    single = [
        await engine_for(uow).check(r.user_id, r.permission.resource, r.permission.action, r.target_account_id)
        for r in requests
    ]
    assert batch == single
    assert [d.granted for d in batch] == [True, True, False, False]


@pytest.mark.asyncio
async def test_is_super_admin(world):
    uow, admin, agent = world["uow"], uuid4(), uuid4()
    await grant_system(uow, admin, world["roles"]["admin"])
    await grant_system(uow, agent, world["roles"]["support"])
    engine = engine_for(uow)

    assert await engine.is_super_admin(admin)
    assert not await engine.is_super_admin(agent)
    assert not await engine.is_super_admin(uuid4())


@pytest.mark.asyncio
async def test_accessible_accounts(world):
    uow, user, admin = world["uow"], uuid4(), uuid4()
    await uow.memberships.add(make_membership(user, world["eu"], (world["roles"]["viewer"], SUBSIDIARY)))
    await uow.memberships.add(make_membership(user, world["other"], (world["roles"]["viewer"], OWN)))
    await grant_system(uow, admin, world["roles"]["admin"])
    engine = engine_for(uow)

    assert await engine.accessible_account_ids(user) == {world["eu"].id, world["berlin"].id, world["other"].id}
    assert len(await engine.accessible_account_ids(admin)) == 5


@pytest.mark.asyncio
async def test_wildcard_templates_grant_at_their_scope(world):
    uow, user, operator = world["uow"], uuid4(), uuid4()
    lead = uow.roles.add(make_role("Ticket Lead", ["tickets:*"]))
    everything = uow.roles.add(make_role("Operator", ["*:*"]))
    await uow.memberships.add(make_membership(user, world["acme"], (lead, SUBSIDIARY)))
    await grant_system(uow, operator, everything)
    engine = engine_for(uow)

    assert (await engine.check(user, "tickets", "close", world["berlin"].id)).scope == SUBSIDIARY
    assert not (await engine.check(user, "invoices", "view", world["acme"].id)).granted
    assert (await engine.check(operator, "invoices", "approve")).scope == ACCOUNT
    assert not await engine.is_super_admin(operator)
