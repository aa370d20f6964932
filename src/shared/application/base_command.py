"""
Base Command Contract
All write operations (validate-then-write units) inherit from this
"""
from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class BaseCommand:
    """
    Base class for all commands.

    Commands are immutable requests to change state. Each command has a
    matching CommandHandler that validates and applies it inside one unit
    of work.

    Example:
        @dataclass(frozen=True)
        class ReparentAccountCommand(BaseCommand):
            account_id: UUID
            new_parent_id: UUID | None
    """

    # Who asked; authorization is verified before the command is built.
    issued_by: UUID | None = field(default=None, kw_only=True)
