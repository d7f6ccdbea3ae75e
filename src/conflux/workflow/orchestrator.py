"""MergeWorkflow - sync a feature branch into main, fail-fast."""

from __future__ import annotations

from conflux.core.config import SyncState
from conflux.core.result import WorkflowResult
from conflux.git.repo import Git
from conflux.workflow.graph import create_workflow
from conflux.workflow.nodes.validate import Validate


class MergeWorkflow:
    """Checkout, pull --rebase, rebase and merge, stopping at the
    first failed step.

    Nothing is rolled back: after a failure the repository stays as
    the last successful step left it, and the result names the step
    that failed along with git's output.
    """

    def __init__(self, git: Git):
        self.git = git
        self.graph = create_workflow()

    async def run(
        self,
        main_branch: str,
        feature_branch: str,
        rebase_args: list[str] | None = None,
        state: SyncState | None = None,
    ) -> WorkflowResult:
        """Run the workflow.

        Args:
            main_branch: Branch to merge into
            feature_branch: Branch to rebase and merge
            rebase_args: Extra rebase arguments, placed before the
                target branch
            state: SyncState to record progress in (a new one when
                omitted)

        Returns:
            WorkflowResult; failures are results, not exceptions
        """
        state = self._prepare(state, main_branch, feature_branch, rebase_args)
        run = await self.graph.run(Validate(), state=state, deps=self.git)
        return run.output

    def run_sync(
        self,
        main_branch: str,
        feature_branch: str,
        rebase_args: list[str] | None = None,
        state: SyncState | None = None,
    ) -> WorkflowResult:
        """Blocking version of run()."""
        state = self._prepare(state, main_branch, feature_branch, rebase_args)
        run = self.graph.run_sync(Validate(), state=state, deps=self.git)
        return run.output

    @staticmethod
    def _prepare(
        state: SyncState | None,
        main_branch: str,
        feature_branch: str,
        rebase_args: list[str] | None,
    ) -> SyncState:
        state = state or SyncState()
        state.main_branch = main_branch or ""
        state.feature_branch = feature_branch or ""
        state.rebase_args = list(rebase_args or [])
        state.steps = []
        state.completed = 0
        state.status = "pending"
        return state
