"""State definitions for the completion orchestration graph."""

from pydantic import BaseModel

from weather_chat.models.llm import ConversationTurn, ToolInvocationRequest


class OrchestrationState(BaseModel):
    """State passed through every node of the orchestration graph.

    `contents` only ever grows by appending; turns are never reordered.
    """

    contents: list[ConversationTurn]

    # Tool round trips completed so far
    tool_rounds: int = 0

    # Set by the completion node when the model asks for a tool
    pending_call: ToolInvocationRequest | None = None

    final_text: str | None = None
    tool_used: bool = False
