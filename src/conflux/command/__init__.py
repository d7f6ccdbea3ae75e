"""CLI command modules for conflux."""

from conflux.command.check import CheckCommand
from conflux.command.conflicts import ConflictsCommand
from conflux.command.resolve import ResolveCommand
from conflux.command.sync import SyncCommand

__all__ = [
    "CheckCommand",
    "ConflictsCommand",
    "ResolveCommand",
    "SyncCommand",
]
