"""Node implementations for the orchestration graph."""

from typing import Any

from weather_chat.clients.base import CompletionProvider
from weather_chat.graphs.state import OrchestrationState
from weather_chat.models.llm import ConversationTurn
from weather_chat.tools.registry import ToolsRegistry
from weather_chat.utils.logging import get_logger

logger = get_logger(__name__)

NO_RESPONSE_TEXT = "No response."
NO_SUMMARY_TEXT = "Processed weather data but got no summary."


class OrchestratorNodes:
    """Graph nodes bound to a completion provider and a tools registry."""

    def __init__(self, completion: CompletionProvider, registry: ToolsRegistry, max_tool_rounds: int):
        self.completion = completion
        self.registry = registry
        self.max_tool_rounds = max_tool_rounds

    async def complete(self, state: OrchestrationState) -> dict[str, Any]:
        """Call the completion provider and decide between a tool call and a final answer.

        Tool calls are allowed only while tool rounds remain. The declarations are
        sent on every round since earlier rounds leave tool turns in the history.
        When the model asks for several tools at once only the first request is honored.
        """
        offer_tools = state.tool_rounds < self.max_tool_rounds
        tools = self.registry.declarations()
        logger.info(
            f"Completion round {state.tool_rounds + 1}: {len(state.contents)} turns, "
            f"tool calls {'allowed' if offer_tools else 'disabled'}"
        )

        response = await self.completion.generate(state.contents, tools=tools, allow_tool_calls=offer_tools)

        if offer_tools and response.function_calls:
            call, *ignored = response.function_calls
            if ignored:
                logger.warning(f"Model requested {len(response.function_calls)} tools; ignoring all but {call.name}")
            logger.info(f"Model requested tool: {call.name}")
            return {"pending_call": call}

        if response.function_calls:
            logger.warning("Model requested a tool after the tool round limit; using its text instead")

        fallback = NO_RESPONSE_TEXT if state.tool_rounds == 0 else NO_SUMMARY_TEXT
        return {"pending_call": None, "final_text": response.text or fallback}

    async def dispatch(self, state: OrchestrationState) -> dict[str, Any]:
        """Execute the pending tool call and append the call and its result to the history.

        Forecast failures arrive here as result data and are passed on to the
        model; only unknown tools and invalid arguments abort the request.
        """
        call = state.pending_call
        payload = await self.registry.dispatch(call)

        if "error" in payload:
            logger.info(f"Tool {call.name} returned an error result: {payload['error']}")

        return {
            "contents": [
                *state.contents,
                ConversationTurn.function_call(call),
                ConversationTurn.function_response(call, payload),
            ],
            "pending_call": None,
            "tool_rounds": state.tool_rounds + 1,
            "tool_used": True,
        }
