"""Tools exposed to the model."""

from weather_chat.tools.registry import ToolsRegistry, create_tools_registry

__all__ = ["ToolsRegistry", "create_tools_registry"]
