"""Completion provider interface."""

from typing import Protocol

from weather_chat.models.llm import CompletionResponse, ConversationTurn, ToolDeclaration


class CompletionProvider(Protocol):
    """Interface for remote language-model completion services."""

    async def generate(
        self,
        contents: list[ConversationTurn],
        tools: list[ToolDeclaration] | None = None,
        allow_tool_calls: bool = True,
    ) -> CompletionResponse:
        """Run one completion call.

        Args:
            contents: Ordered conversation turns
            tools: Tool declarations. They must be sent whenever the turns carry tool calls or results
            allow_tool_calls: Whether the model may request a tool in this call

        Returns:
            Generated text and any tool invocation requests

        Raises:
            UpstreamModelError: The provider failed or returned an unusable response
        """
        ...
