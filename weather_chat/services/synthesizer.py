"""Shapes orchestration outcomes and failures into client responses."""

from weather_chat.errors import ChatError, InternalError
from weather_chat.models.chat import ChatOutcome, ChatResponse, ErrorResponse
from weather_chat.utils.logging import get_logger

logger = get_logger(__name__)


def synthesize_response(outcome: ChatOutcome) -> ChatResponse:
    """Build the success response."""
    return ChatResponse(text=outcome.text, tool_used=outcome.tool_used)


def synthesize_error(exc: Exception) -> tuple[int, ErrorResponse]:
    """Map a failure to an HTTP status and a client-safe error body.

    Chat errors carry their own public message; anything else is logged with
    its traceback and reported as an opaque internal error.
    """
    if isinstance(exc, ChatError):
        if exc.status_code >= 500:
            logger.error(f"Chat request failed: {type(exc).__name__}: {exc}")
        else:
            logger.warning(f"Chat request rejected: {exc}")
        return exc.status_code, ErrorResponse(error=exc.public_message)

    logger.error(f"Unexpected error handling chat request: {exc}", exc_info=exc)
    internal = InternalError()
    return internal.status_code, ErrorResponse(error=internal.public_message)
