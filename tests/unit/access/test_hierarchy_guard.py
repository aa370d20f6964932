from uuid import uuid4

import pytest

from access.domain.entities.account import AccountType
from access.domain.entities.system_role_assignment import SystemRoleAssignment
from access.domain.exceptions import AccountNotFoundError, AssignmentNotFoundError
from access.domain.services.account_tree import AccountTree
from access.domain.services.hierarchy_guard import HierarchyGuard, check_reparent
from access.domain.value_objects.rule_violation import ViolationCode
from fakes import FakeUnitOfWork, make_account, make_role

ORG, SUB, IND = AccountType.ORGANIZATION, AccountType.SUBSIDIARY, AccountType.INDIVIDUAL


@pytest.fixture
def accounts():
    acme = make_account("Acme", ORG)
    eu = make_account("Acme EU", SUB, parent=acme)
    berlin = make_account("Acme Berlin", SUB, parent=eu)
    solo = make_account("Solo", IND)
    other = make_account("Other", ORG)
    return {"acme": acme, "eu": eu, "berlin": berlin, "solo": solo, "other": other}


@pytest.fixture
def tree(accounts):
    return AccountTree(accounts.values())


def test_self_parent_always_fails(tree, accounts):
    for account in accounts.values():
        result = check_reparent(tree, account.id, account.id)
        assert result.is_failure()
        assert result.error.code == ViolationCode.SELF_PARENT


def test_moving_under_a_descendant_is_a_cycle(tree, accounts):
    result = check_reparent(tree, accounts["acme"].id, accounts["berlin"].id)
    assert result.error.code == ViolationCode.CYCLE
    result = check_reparent(tree, accounts["eu"].id, accounts["berlin"].id)
    assert result.error.code == ViolationCode.CYCLE


def test_subsidiary_needs_a_parent(tree, accounts):
    result = check_reparent(tree, accounts["eu"].id, None)
    assert result.error.code == ViolationCode.SUBSIDIARY_REQUIRES_PARENT
    result = check_reparent(tree, accounts["other"].id, None, SUB)
    assert result.error.code == ViolationCode.SUBSIDIARY_REQUIRES_PARENT


def test_subsidiary_under_individual_fails(tree, accounts):
    result = check_reparent(tree, accounts["berlin"].id, accounts["solo"].id)
    assert result.error.code == ViolationCode.INCOMPATIBLE_PARENT_TYPE
    result = check_reparent(tree, accounts["other"].id, accounts["solo"].id, SUB)
    assert result.error.code == ViolationCode.INCOMPATIBLE_PARENT_TYPE


def test_subsidiary_under_organization_or_subsidiary_passes(tree, accounts):
    assert check_reparent(tree, accounts["berlin"].id, accounts["other"].id).is_success()
    assert check_reparent(tree, accounts["berlin"].id, accounts["acme"].id).is_success()
    assert check_reparent(tree, accounts["other"].id, accounts["eu"].id, SUB).is_success()


def test_individual_with_organization_children_fails(tree, accounts):
    result = check_reparent(tree, accounts["acme"].id, None, IND)
    assert result.error.code == ViolationCode.INCOMPATIBLE_CHILD_TYPE
    assert check_reparent(tree, accounts["berlin"].id, accounts["acme"].id, IND).is_success()


def test_organization_may_move_under_an_individual(tree, accounts):
    assert check_reparent(tree, accounts["other"].id, accounts["solo"].id).is_success()
    assert check_reparent(tree, accounts["acme"].id, accounts["solo"].id).is_success()


def test_first_failing_rule_wins(tree, accounts):
    # self-parent is checked before the type rules
    result = check_reparent(tree, accounts["eu"].id, accounts["eu"].id, IND)
    assert result.error.code == ViolationCode.SELF_PARENT


def test_unknown_ids_raise(tree, accounts):
    ghost = make_account("Ghost")
    with pytest.raises(AccountNotFoundError):
        check_reparent(tree, ghost.id, accounts["acme"].id)
    with pytest.raises(AccountNotFoundError):
        check_reparent(tree, accounts["acme"].id, ghost.id)


def test_violation_carries_reason_and_details(tree, accounts):
    violation = check_reparent(tree, accounts["acme"].id, accounts["eu"].id).error
    assert violation.message
    assert violation.details["account_id"] == str(accounts["acme"].id)


@pytest.mark.asyncio
async def test_guard_loads_tree_from_repository(accounts):
    uow = FakeUnitOfWork(accounts=accounts.values())
    guard = HierarchyGuard(uow.accounts, uow.system_roles, uow.roles)
    result = await guard.validate_reparent(accounts["acme"].id, accounts["berlin"].id)
    assert result.error.code == ViolationCode.CYCLE
    assert uow.accounts.list_all_calls == 1


@pytest.mark.asyncio
async def test_last_super_admin_cannot_be_removed():
    admin_role = make_role("Super Admin", grants_all=True)
    uow = FakeUnitOfWork(roles=[admin_role])
    guard = HierarchyGuard(uow.accounts, uow.system_roles, uow.roles)
    only = await uow.system_roles.add(SystemRoleAssignment(id=uuid4(), user_id=uuid4(), role_id=admin_role.id))

    result = await guard.validate_role_removal(only.id)
    assert result.is_failure()
    assert result.error.code == ViolationCode.LAST_SUPER_ADMIN

    second = await uow.system_roles.add(SystemRoleAssignment(id=uuid4(), user_id=uuid4(), role_id=admin_role.id))
    assert (await guard.validate_role_removal(only.id)).is_success()
    assert (await guard.validate_role_removal(second.id)).is_success()


@pytest.mark.asyncio
async def test_removing_ordinary_role_is_always_allowed():
    agent = make_role("Agent", ["tickets:view"])
    uow = FakeUnitOfWork(roles=[agent])
    guard = HierarchyGuard(uow.accounts, uow.system_roles, uow.roles)
    assignment = await uow.system_roles.add(SystemRoleAssignment(id=uuid4(), user_id=uuid4(), role_id=agent.id))
    assert (await guard.validate_role_removal(assignment.id)).is_success()


@pytest.mark.asyncio
async def test_unknown_assignment_raises():
    uow = FakeUnitOfWork()
    guard = HierarchyGuard(uow.accounts, uow.system_roles, uow.roles)
    with pytest.raises(AssignmentNotFoundError):
        await guard.validate_role_removal(uuid4())
