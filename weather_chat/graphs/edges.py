"""Edge logic and routing for the orchestration graph."""

from typing import Literal

from weather_chat.graphs.state import OrchestrationState
from weather_chat.utils.logging import get_logger

logger = get_logger(__name__)


def route_completion_output(state: OrchestrationState) -> Literal["dispatch", "end"]:
    """Route from the completion node.

    A pending tool call goes to dispatch; anything else means the final answer is ready.
    """
    if state.pending_call is not None:
        logger.debug(f"Routing to dispatch for tool {state.pending_call.name}")
        return "dispatch"
    return "end"
