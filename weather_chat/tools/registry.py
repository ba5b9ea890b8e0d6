"""Tools registry: declarations for the model and the name → handler dispatch table."""

from collections.abc import Iterable
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from weather_chat.clients.nws import NWSClient
from weather_chat.errors import InvalidToolArgumentsError, UnknownToolError
from weather_chat.models.llm import ToolDeclaration, ToolInvocationRequest
from weather_chat.tools.base import ToolDefinition
from weather_chat.tools.weather import create_weather_tool
from weather_chat.utils.logging import get_logger

logger = get_logger(__name__)


class ToolsRegistry:
    """Read-only registry of the tools offered to the model."""

    def __init__(self, tools: Iterable[ToolDefinition]):
        """Initialize the registry.

        Args:
            tools: Tool definitions; names must be unique

        Raises:
            ValueError: If two tools share a name
        """
        table: dict[str, ToolDefinition] = {}
        for tool in tools:
            if tool.name in table:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            table[tool.name] = tool

        self._tools = MappingProxyType(table)
        self._declarations = tuple(tool.declaration() for tool in table.values())

    def declarations(self) -> list[ToolDeclaration]:
        """Get the declarations supplied to the completion provider."""
        return list(self._declarations)

    def get(self, name: str) -> ToolDefinition:
        """Look up a tool by name.

        Raises:
            UnknownToolError: If no tool with this name is registered
        """
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def get_tool_names(self) -> list[str]:
        """Get list of all registered tool names."""
        return list(self._tools.keys())

    def has_tool(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    async def dispatch(self, call: ToolInvocationRequest) -> dict[str, Any]:
        """Validate a tool invocation request and run its handler.

        Returns:
            The handler's JSON-serializable result payload

        Raises:
            UnknownToolError: The requested tool is not registered
            InvalidToolArgumentsError: Arguments are missing or malformed; the handler is not called
        """
        tool = self.get(call.name)

        try:
            params = tool.parse_input(call.args)
        except PydanticValidationError as e:
            detail = "; ".join(
                f"{'.'.join(str(loc) for loc in error['loc']) or 'arguments'}: {error['msg']}" for error in e.errors()
            )
            raise InvalidToolArgumentsError(call.name, detail) from e

        logger.debug(f"Dispatching tool {call.name} with input: {call.args}")
        return await tool.handler(params)


def create_tools_registry(nws_client: NWSClient) -> ToolsRegistry:
    """Build the registry with the default tool set."""
    return ToolsRegistry([create_weather_tool(nws_client)])
