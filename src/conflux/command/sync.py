"""Sync command - rebase a feature branch onto main and merge it."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import CliPositionalArg

from conflux.core.errors import ConfluxError, ValidationError
from conflux.core.log import logger
from conflux.git.repo import Git


class SyncCommand(BaseModel):
    """Bring a feature branch into main with linear history.

    Steps: (1) checkout main, (2) pull --rebase main from its
    upstream, (3) checkout feature, (4) pull --rebase feature from
    its upstream, (5) rebase feature onto main, (6) checkout main,
    (7) merge feature. Pull steps are skipped for branches without an
    upstream. The first failing step stops the run; earlier steps are
    not undone.
    """

    feature: CliPositionalArg[str] = Field(
        description="Feature branch to rebase and merge",
    )
    main: str | None = Field(
        default=None,
        description="Branch to merge into (default: config.workflow.main_branch)",
    )
    rebase_args: list[str] | None = Field(
        default=None,
        alias="rebase-args",
        description=(
            "Extra arguments for the rebase step, placed before the "
            "target branch (default: config.workflow.rebase_args)"
        ),
    )

    async def run_workflow(self, state: "State") -> int:
        """Run the merge workflow.

        Args:
            state: State instance

        Returns:
            Exit code (0=success)
        """
        from conflux.workflow.orchestrator import MergeWorkflow

        workflow_config = state.config.workflow
        main = self.main or workflow_config.main_branch
        rebase_args = (
            self.rebase_args
            if self.rebase_args is not None
            else workflow_config.rebase_args
        )

        git = Git.from_config(state.config.git)
        try:
            if not git.is_repo():
                raise ValidationError(
                    f"{git.workdir} is not a git repository"
                )

            result = await MergeWorkflow(git).run(
                main,
                self.feature,
                rebase_args,
                state=state.runtime.sync,
            )
            result.raise_for_failure()
        except ConfluxError as e:
            logger.error(str(e))
            return 1
        finally:
            git.executor.close()

        return 0
