"""Validate node - check branch preconditions before touching the tree."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from conflux.core.config import SyncState
from conflux.core.log import logger
from conflux.core.result import WorkflowResult
from conflux.git.repo import Git
from conflux.workflow.nodes.plan import Plan


@dataclass
class Validate(BaseNode[SyncState, Git, WorkflowResult]):
    """Both branches must be named, distinct and exist locally.

    Only silent probes run here, so a failed precondition leaves the
    repository untouched.
    """

    async def run(
        self, ctx: GraphRunContext[SyncState, Git]
    ) -> Plan | End[WorkflowResult]:
        problem = self._check(ctx.state, ctx.deps)
        if problem is not None:
            ctx.state.status = "failed"
            logger.error(problem)
            return End(WorkflowResult.invalid(problem))
        return Plan()

    @staticmethod
    def _check(state: SyncState, git: Git) -> str | None:
        if not state.main_branch:
            return "Main branch name is required"
        if not state.feature_branch:
            return "Feature branch name is required"
        if state.feature_branch == state.main_branch:
            return (
                f"Cannot merge '{state.feature_branch}' into itself"
            )
        for branch in (state.main_branch, state.feature_branch):
            if not git.has_local_branch(branch):
                return f"Branch '{branch}' does not exist locally"
        return None
