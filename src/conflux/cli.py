#!/usr/bin/env python3
"""conflux CLI - resolve git conflicts and sync feature branches."""

import asyncio
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from conflux.command.check import CheckCommand
from conflux.command.conflicts import ConflictsCommand
from conflux.command.resolve import ResolveCommand
from conflux.command.sync import SyncCommand
from conflux.core.config import State
from conflux.core.log import logger


class CliState(State):
    """Resolve git merge conflicts and keep feature branches in sync.

    conflux parses conflict markers into hunks you resolve one at a
    time (ours, theirs, both), writes and stages the result, and
    offers to continue the rebase or merge. It also runs a fail-fast
    checkout / pull --rebase / rebase / merge workflow.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.git.remote upstream)
    2. conflux.yaml in the current directory, then the user config
       directory, then the packaged defaults
    3. .env file
    4. Environment variables
       (CONFLUX_CONFIG__WORKFLOW__MAIN_BRANCH=trunk)
    """

    resolve: CliSubCommand[ResolveCommand]
    sync: CliSubCommand[SyncCommand]
    conflicts: CliSubCommand[ConflictsCommand]
    check: CliSubCommand[CheckCommand]

    def cli_cmd(self):
        """Dispatch to active subcommand, or show help if none
        provided."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Closing the logger flushes the file sink on exit
        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
