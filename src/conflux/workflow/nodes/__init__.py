"""Workflow nodes for the merge graph."""

from conflux.workflow.nodes.plan import Plan
from conflux.workflow.nodes.run_step import RunStep
from conflux.workflow.nodes.validate import Validate

__all__ = [
    "Validate",
    "Plan",
    "RunStep",
]
