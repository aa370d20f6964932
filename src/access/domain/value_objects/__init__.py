from access.domain.value_objects.decision import PermissionDecision, PermissionRequest
from access.domain.value_objects.permission import Permission
from access.domain.value_objects.resolution import Resolution
from access.domain.value_objects.rule_violation import RuleViolation, ViolationCode
from access.domain.value_objects.scope import PermissionScope, PrincipalKind, RoleApplicability

__all__ = [
    "Permission",
    "PermissionDecision",
    "PermissionRequest",
    "PermissionScope",
    "PrincipalKind",
    "RoleApplicability",
    "Resolution",
    "RuleViolation",
    "ViolationCode",
]
