"""Plan node - build the step sequence from current upstreams."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from conflux.core.config import SyncState
from conflux.core.log import logger
from conflux.core.result import WorkflowResult
from conflux.git.repo import Git
from conflux.workflow.nodes.run_step import RunStep
from conflux.workflow.steps import build_steps


@dataclass
class Plan(BaseNode[SyncState, Git, WorkflowResult]):
    """Build a fresh step list for this run."""

    async def run(self, ctx: GraphRunContext[SyncState, Git]) -> RunStep:
        state = ctx.state
        state.steps = build_steps(
            ctx.deps,
            state.main_branch,
            state.feature_branch,
            state.rebase_args,
        )
        state.status = "running"

        for number, step in enumerate(state.steps, start=1):
            logger.debug(f"Planned step {number}: {step.label}")
        return RunStep(0)
