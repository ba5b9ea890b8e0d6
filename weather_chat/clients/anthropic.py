"""Anthropic API client implementing the completion provider interface."""

import json
from dataclasses import dataclass
from typing import Any, Literal

from anthropic import APIError, AsyncAnthropic
from anthropic.types import Message
from pydantic import BaseModel

from weather_chat.config import Settings
from weather_chat.errors import UpstreamModelError
from weather_chat.models.llm import (
    CompletionResponse,
    ConversationTurn,
    FunctionCallPart,
    FunctionResponsePart,
    TextPart,
    ToolDeclaration,
    ToolInvocationRequest,
)
from weather_chat.utils.logging import get_logger

logger = get_logger(__name__)


class AnthropicMessage(BaseModel):
    """Message format for Anthropic API."""

    role: Literal["user", "assistant"]
    content: str | list[dict[str, Any]]


class AnthropicTool(BaseModel):
    """Tool definition for Anthropic API."""

    name: str
    description: str
    input_schema: dict[str, Any]


@dataclass
class TokenUsage:
    """Token usage information from Anthropic API."""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


def to_anthropic_message(turn: ConversationTurn) -> AnthropicMessage:
    """Convert a conversation turn to the Anthropic message format.

    `model` turns become assistant messages; `function` turns become user
    messages carrying tool_result blocks, as the Messages API expects.
    """
    if turn.role == "user" and all(isinstance(part, TextPart) for part in turn.parts):
        return AnthropicMessage(role="user", content=turn.text)

    blocks: list[dict[str, Any]] = []
    for part in turn.parts:
        if isinstance(part, TextPart):
            blocks.append({"type": "text", "text": part.text})
        elif isinstance(part, FunctionCallPart):
            blocks.append({"type": "tool_use", "id": part.call.id, "name": part.call.name, "input": part.call.args})
        elif isinstance(part, FunctionResponsePart):
            blocks.append(
                {
                    "type": "tool_result",
                    "tool_use_id": part.call_id,
                    "content": json.dumps(part.response),
                    "is_error": part.is_error,
                }
            )

    role = "assistant" if turn.role == "model" else "user"
    return AnthropicMessage(role=role, content=blocks)


def to_anthropic_tool(declaration: ToolDeclaration) -> AnthropicTool:
    """Convert a tool declaration to the Anthropic tool format."""
    return AnthropicTool(
        name=declaration.name,
        description=declaration.description,
        input_schema=declaration.parameters,
    )


class AnthropicClient:
    """Completion provider backed by the Anthropic Messages API.

    The SDK's own retries are disabled; a failed call fails the chat request.
    """

    def __init__(self, settings: Settings, client: AsyncAnthropic | None = None):
        """Initialize Anthropic client.

        Args:
            settings: Service settings (API key, model, limits, timeout)
            client: Preconfigured SDK client, mainly for tests
        """
        self.settings = settings
        self.client = client or AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            max_retries=0,
            timeout=settings.completion_timeout,
        )

    async def close(self) -> None:
        await self.client.close()

    async def generate(
        self,
        contents: list[ConversationTurn],
        tools: list[ToolDeclaration] | None = None,
        allow_tool_calls: bool = True,
    ) -> CompletionResponse:
        """Create a message with Claude API.

        Args:
            contents: Conversation history
            tools: Available tools for Claude, omitted from the request when empty
            allow_tool_calls: Sent as tool_choice auto, or none to force a text answer

        Returns:
            Provider-agnostic completion response

        Raises:
            UpstreamModelError: The API call failed or the response could not be read
        """
        request_params: dict[str, Any] = {
            "model": self.settings.model,
            "max_tokens": self.settings.max_tokens,
            "temperature": self.settings.temperature,
            "system": self.settings.system_prompt,
            "messages": [to_anthropic_message(turn).model_dump() for turn in contents],
        }
        if tools:
            request_params["tools"] = [to_anthropic_tool(tool).model_dump() for tool in tools]
            # tool_use and tool_result blocks are only accepted alongside tool definitions
            request_params["tool_choice"] = {"type": "auto" if allow_tool_calls else "none"}

        logger.debug(
            f"Creating message with {len(contents)} turns, {len(tools) if tools else 0} tools, "
            f"tool calls {'allowed' if allow_tool_calls else 'disabled'}"
        )

        try:
            response: Message = await self.client.messages.create(**request_params)
        except APIError as e:
            status = getattr(e, "status_code", None)
            logger.error(f"Anthropic API call failed ({type(e).__name__}, status={status}): {e}")
            raise UpstreamModelError() from e

        return self._convert_response(response)

    def _convert_response(self, response: Message) -> CompletionResponse:
        """Convert an Anthropic message to a provider-agnostic completion response."""
        try:
            texts: list[str] = []
            calls: list[ToolInvocationRequest] = []
            for block in response.content:
                if block.type == "text":
                    texts.append(block.text)
                elif block.type == "tool_use":
                    calls.append(ToolInvocationRequest(id=block.id, name=block.name, args=dict(block.input or {})))
                else:
                    logger.warning(f"Unknown content block type: {block.type}")

            usage = TokenUsage()
            if response.usage:
                usage = TokenUsage(
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                )
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"Unusable Anthropic response: {e}")
            raise UpstreamModelError() from e

        logger.debug(
            f"Response received - Stop reason: {response.stop_reason}, "
            f"tool calls: {len(calls)}, tokens: {usage.total_tokens}"
        )

        return CompletionResponse(
            text="".join(texts) or None,
            function_calls=calls,
            stop_reason=response.stop_reason,
            model=response.model,
        )
