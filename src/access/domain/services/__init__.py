from access.domain.services.account_tree import AccountTree, HierarchyStats
from access.domain.services.hierarchy_guard import HierarchyGuard, check_reparent

__all__ = [
    "AccountTree",
    "HierarchyStats",
    "HierarchyGuard",
    "check_reparent",
]
