"""Completion orchestration graph: first completion, optional tool round trips, final answer."""

from langgraph.graph import END, StateGraph

from weather_chat.clients.base import CompletionProvider
from weather_chat.errors import ValidationError
from weather_chat.graphs.edges import route_completion_output
from weather_chat.graphs.nodes import OrchestratorNodes
from weather_chat.graphs.state import OrchestrationState
from weather_chat.models.chat import ChatOutcome
from weather_chat.models.llm import ConversationTurn
from weather_chat.tools.registry import ToolsRegistry
from weather_chat.utils.logging import get_logger

logger = get_logger(__name__)


def create_orchestration_graph(nodes: OrchestratorNodes):
    """Create the orchestration graph.

    complete ──(tool requested)──▶ dispatch ──▶ complete ──(answer)──▶ END

    The completion node stops offering tools once the round limit is
    reached, so the loop always terminates.

    Args:
        nodes: Node implementations bound to their collaborators

    Returns:
        Compiled LangGraph workflow
    """
    workflow = StateGraph(OrchestrationState)

    workflow.add_node("complete", nodes.complete)
    workflow.add_node("dispatch", nodes.dispatch)

    workflow.set_entry_point("complete")

    workflow.add_conditional_edges(
        "complete",
        route_completion_output,
        {
            "dispatch": "dispatch",
            "end": END,
        },
    )
    workflow.add_edge("dispatch", "complete")

    return workflow.compile()


class CompletionOrchestrator:
    """Drives one chat request through the orchestration graph."""

    def __init__(self, completion: CompletionProvider, registry: ToolsRegistry, max_tool_rounds: int = 1):
        """Initialize the orchestrator.

        Args:
            completion: Completion provider used for every round
            registry: Tools offered to the model and their dispatch table
            max_tool_rounds: Tool round trips allowed per request
        """
        self.max_tool_rounds = max_tool_rounds
        self.graph = create_orchestration_graph(OrchestratorNodes(completion, registry, max_tool_rounds))
        # One step for the first completion plus dispatch and completion per round
        self.recursion_limit = 2 * max_tool_rounds + 2

    async def run(self, contents: list[ConversationTurn]) -> ChatOutcome:
        """Run the orchestration cycle for one request.

        Args:
            contents: Translated history ending with the new user turn

        Returns:
            Final answer text and whether a tool was used

        Raises:
            ValidationError: Empty history, or an invalid tool request from the model
            UpstreamModelError: The completion provider failed at any round
        """
        if not contents:
            raise ValidationError("Conversation history must contain at least one turn")

        result = await self.graph.ainvoke(
            {"contents": contents},
            {"recursion_limit": self.recursion_limit},
        )
        state = OrchestrationState.model_validate(result)

        logger.info(f"Orchestration finished: tool_used={state.tool_used}, tool_rounds={state.tool_rounds}")
        return ChatOutcome(text=state.final_text or "", tool_used=state.tool_used, tool_rounds=state.tool_rounds)
