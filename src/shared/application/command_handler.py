"""
Base Command Handler
Abstract base for all command handlers
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from shared.application.base_command import BaseCommand
from shared.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)

TCommand = TypeVar("TCommand", bound=BaseCommand)
TResult = TypeVar("TResult")


class CommandHandler(ABC, Generic[TCommand, TResult]):
    """
    Abstract base class for command handlers.
    
    Handlers run validation and persistence for one command type. Rule
    failures come back as `Failure` values; only malformed input and store
    errors raise.
    
    Type Parameters:
        TCommand: Command type this handler processes
        TResult: Return type of the handler
    """
    
    @abstractmethod
    async def handle(self, command: TCommand) -> TResult:
        """Handle the command and return its result."""
    
    async def __call__(self, command: TCommand) -> TResult:
        """Run `handle` with logging around it."""
        command_name = command.__class__.__name__
        logger.info("Executing command", command=command_name)
        
        try:
            result = await self.handle(command)
        except Exception as e:
            logger.error("Command execution failed", command=command_name, error=str(e))
            raise
        
        logger.info("Command executed", command=command_name)
        return result
