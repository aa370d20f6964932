"""
AccountTree - ancestor/descendant queries over one snapshot of the forest
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from access.domain.entities.account import Account, AccountType
from access.domain.exceptions import AccountNotFoundError
from access.domain.protocols.account_repository_protocol import IAccountRepository


@dataclass(frozen=True)
class HierarchyStats:
    total_accounts: int
    organization_count: int
    subsidiary_count: int
    individual_count: int
    max_depth: int


class AccountTree:
    """
    In-memory view of the account forest, built once per request from an
    id -> account map. Traversals are iterative and keep a visited set, so
    corrupt (cyclic) data cannot make them loop.

    Every query on an unknown account id raises AccountNotFoundError.
    """

    def __init__(self, accounts: Iterable[Account]) -> None:
        self._accounts: dict[UUID, Account] = {a.id: a for a in accounts}
        self._children: dict[UUID, list[UUID]] = defaultdict(list)
        for account in self._accounts.values():
            if account.parent_id is not None:
                self._children[account.parent_id].append(account.id)

    @classmethod
    async def load(cls, repository: IAccountRepository, *, for_update: bool = False) -> AccountTree:
        return cls(await repository.list_all(for_update=for_update))

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def get(self, account_id: UUID) -> Account:
        try:
            return self._accounts[account_id]
        except KeyError:
            raise AccountNotFoundError(account_id) from None

    def all_ids(self) -> set[UUID]:
        return set(self._accounts)

    def children(self, account_id: UUID) -> list[Account]:
        self.get(account_id)
        return [self._accounts[c] for c in self._children.get(account_id, ())]

    def ancestors(self, account_id: UUID) -> list[Account]:
        """Ancestors, nearest first and root last."""
        current = self.get(account_id)
        result: list[Account] = []
        seen = {current.id}
        while current.parent_id is not None and current.parent_id in self._accounts:
            if current.parent_id in seen:
                break
            current = self._accounts[current.parent_id]
            seen.add(current.id)
            result.append(current)
        return result

    def descendant_ids(self, account_id: UUID) -> set[UUID]:
        self.get(account_id)
        found: set[UUID] = set()
        stack = list(self._children.get(account_id, ()))
        while stack:
            child_id = stack.pop()
            if child_id in found or child_id == account_id:
                continue
            found.add(child_id)
            stack.extend(self._children.get(child_id, ()))
        return found

    def descendants(self, account_id: UUID) -> set[Account]:
        """Every account reachable downward from account_id (transitive)."""
        return {self._accounts[i] for i in self.descendant_ids(account_id)}

    def subtree_ids(self, account_id: UUID) -> set[UUID]:
        """account_id plus all its descendants; the 'subsidiary' filter set."""
        return {account_id} | self.descendant_ids(account_id)

    def is_descendant_of(self, candidate_id: UUID, ancestor_id: UUID) -> bool:
        """True if candidate lies strictly below ancestor. Never true for itself."""
        self.get(ancestor_id)
        if candidate_id == ancestor_id:
            return False
        return any(a.id == ancestor_id for a in self.ancestors(candidate_id))

    @staticmethod
    def type_compatible(child_type: AccountType, parent_type: AccountType) -> bool:
        return not (child_type == AccountType.SUBSIDIARY and parent_type == AccountType.INDIVIDUAL)

    def children_compatible(self, account_id: UUID, new_type: AccountType) -> bool:
        """False iff new_type is INDIVIDUAL and a child is an ORGANIZATION or SUBSIDIARY."""
        if new_type != AccountType.INDIVIDUAL:
            return True
        return not any(
            child.account_type in (AccountType.ORGANIZATION, AccountType.SUBSIDIARY)
            for child in self.children(account_id)
        )

    # ------------------------------------------------------------------
    # Presentation helpers
    # ------------------------------------------------------------------

    def roots(self) -> list[Account]:
        """Accounts without a parent, or whose parent is missing from the snapshot."""
        return sorted(
            (a for a in self._accounts.values() if a.parent_id is None or a.parent_id not in self._accounts),
            key=lambda a: a.name.lower(),
        )

    def depth(self, account_id: UUID) -> int:
        return len(self.ancestors(account_id))

    def path(self, account_id: UUID, separator: str = " > ") -> str:
        """Names from root to account, e.g. 'Acme > Acme EU > Acme Berlin'."""
        chain = [self.get(account_id), *self.ancestors(account_id)]
        return separator.join(a.name for a in reversed(chain))

    def stats(self) -> HierarchyStats:
        by_type = defaultdict(int)
        for account in self._accounts.values():
            by_type[account.account_type] += 1
        return HierarchyStats(
            total_accounts=len(self._accounts),
            organization_count=by_type[AccountType.ORGANIZATION],
            subsidiary_count=by_type[AccountType.SUBSIDIARY],
            individual_count=by_type[AccountType.INDIVIDUAL],
            max_depth=max((self.depth(i) for i in self._accounts), default=0),
        )
