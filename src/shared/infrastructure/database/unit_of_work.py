"""
Unit of Work Interface (Protocol)
Manages transactions and coordinates repository operations
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IUnitOfWork(Protocol):
    """
    Unit of Work interface for transaction management.

    Validate-then-write sequences (reparent, role removal, mapping writes)
    run inside one UoW so validation and mutation observe the same state.

    Usage:
        async with uow:
            result = await guard.validate_reparent(account_id, parent_id)
            if result.is_success():
                await uow.accounts.update(account)
                await uow.commit()
    """

    async def __aenter__(self) -> IUnitOfWork:
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Roll back if an exception occurred or nothing was committed."""
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...
