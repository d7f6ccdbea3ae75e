"""Merge workflow: step planning and the fail-fast orchestrator."""

from conflux.workflow.orchestrator import MergeWorkflow
from conflux.workflow.steps import MergeWorkflowStep, build_steps

__all__ = ["MergeWorkflow", "MergeWorkflowStep", "build_steps"]
