"""
Shared Application Layer
Command contracts for write operations
"""

from shared.application.base_command import BaseCommand
from shared.application.command_handler import CommandHandler

__all__ = [
    "BaseCommand",
    "CommandHandler",
]
