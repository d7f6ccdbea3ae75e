"""Graph workflow definition."""

from pydantic_graph import Graph

from conflux.core.config import SyncState
from conflux.core.log import logger


def create_workflow() -> Graph:
    """Create the merge workflow graph.

    Validate → Plan → RunStep → [RunStep ... | End]

    Returns:
        Graph over SyncState, with the Git wrapper as deps; the end
        type (WorkflowResult) comes from the node annotations
    """
    logger.debug("Building workflow graph")

    from conflux.workflow.nodes.plan import Plan
    from conflux.workflow.nodes.run_step import RunStep
    from conflux.workflow.nodes.validate import Validate

    return Graph(
        nodes=(
            Validate,
            Plan,
            RunStep,
        ),
        name="merge_workflow",
        state_type=SyncState,
    )
