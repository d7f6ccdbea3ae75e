"""RunStep node - execute one planned git command."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from conflux.core.config import SyncState
from conflux.core.log import logger
from conflux.core.result import WorkflowResult
from conflux.git.repo import Git


@dataclass
class RunStep(BaseNode[SyncState, Git, WorkflowResult]):
    """Run step ``index`` (0-based into state.steps) and stop on failure."""

    index: int = 0

    async def run(
        self, ctx: GraphRunContext[SyncState, Git]
    ) -> RunStep | End[WorkflowResult]:
        """Execute the step.

        Returns:
            RunStep: For the next step when this one succeeded
            End: With the failure, or with success after the last step
        """
        state = ctx.state
        step = state.steps[self.index]
        number = self.index + 1

        logger.info(f"Step {number}/{len(state.steps)}: {step.label}")
        result = step.run(ctx.deps)

        if not result.success:
            state.status = "failed"
            logger.error(f"Step {number} failed: {step.label}")
            return End(
                WorkflowResult.failed(number, step.label, result.output_lines)
            )

        state.completed = number
        if number < len(state.steps):
            return RunStep(self.index + 1)

        state.status = "complete"
        message = f"Merged {state.feature_branch} into {state.main_branch}"
        logger.info(message)
        return End(WorkflowResult.ok(message))
