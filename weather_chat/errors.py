"""Error taxonomy for the chat service."""


class ChatError(Exception):
    """Base class for errors that end a chat request with a client-facing message."""

    status_code: int = 500
    public_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None):
        """Initialize the error.

        Args:
            message: Client-safe description. Defaults to the class public message.
        """
        super().__init__(message or self.public_message)
        if message:
            self.public_message = message


class ValidationError(ChatError):
    """Malformed client input (unknown role, empty or oversized message)."""

    status_code = 400
    public_message = "Invalid request"


class ToolExecutionError(ChatError):
    """A requested tool could not be executed."""

    public_message = "Tool execution failed"


class InvalidToolCallError(ValidationError):
    """The model produced a tool request that cannot be honored."""

    status_code = 500
    public_message = "The model requested an invalid tool call"


class UnknownToolError(InvalidToolCallError, ToolExecutionError):
    """The model requested a tool that is not registered."""

    def __init__(self, tool_name: str):
        """Initialize with the unregistered tool name."""
        self.tool_name = tool_name
        super().__init__(f"Unknown tool requested: {tool_name}")


class InvalidToolArgumentsError(InvalidToolCallError):
    """Tool arguments are missing or malformed."""

    def __init__(self, tool_name: str, detail: str):
        """Initialize with the tool name and a validation summary."""
        self.tool_name = tool_name
        super().__init__(f"Invalid arguments for tool {tool_name}: {detail}")


class UpstreamModelError(ChatError):
    """The completion provider failed or returned an unusable response."""

    public_message = "The language model service failed to respond. Please try again."


class InternalError(ChatError):
    """Anything unexpected. Never carries internal detail to the client."""


class UpstreamDependencyError(Exception):
    """Forecast provider failure (bad status, missing field, transport error).

    Raised inside the weather adapter only; it is always converted into
    tool-result data before reaching the orchestrator.
    """


class ConfigurationError(Exception):
    """Required configuration is missing or invalid."""
