"""Chat service: one client request from validation to orchestrated answer."""

import asyncio

from weather_chat.errors import ValidationError
from weather_chat.graphs.orchestrator import CompletionOrchestrator
from weather_chat.models.chat import ChatOutcome, ChatRequest
from weather_chat.services.history import translate_history
from weather_chat.utils.logging import get_logger
from weather_chat.utils.tokens import TokenCounter

logger = get_logger(__name__)


class ChatService:
    """Handles chat requests independently; the only shared state is read-only."""

    def __init__(
        self,
        orchestrator: CompletionOrchestrator,
        max_concurrent_requests: int = 32,
        max_message_tokens: int = 2000,
        token_counter: TokenCounter | None = None,
    ):
        """Initialize chat service.

        Args:
            orchestrator: Completion orchestrator shared by all requests
            max_concurrent_requests: Upper bound on chat requests in flight
            max_message_tokens: Largest accepted new message
            token_counter: Token estimator for the message size check
        """
        self.orchestrator = orchestrator
        self.max_message_tokens = max_message_tokens
        self.token_counter = token_counter or TokenCounter()
        self._slots = asyncio.Semaphore(max_concurrent_requests)

    def _validate_message_tokens(self, message: str) -> None:
        token_count = self.token_counter.count(message)
        if token_count > self.max_message_tokens:
            raise ValidationError(
                f"Your message is too long. Please keep messages under {self.max_message_tokens} tokens."
            )

    async def handle(self, request: ChatRequest) -> ChatOutcome:
        """Process a chat request and return the final answer.

        Raises:
            ValidationError: Invalid history, or a blank or oversized message
            UpstreamModelError: The completion provider failed
        """
        self._validate_message_tokens(request.message)
        contents = translate_history(request.history, request.message)

        logger.info(f"Processing chat request: {len(request.history)} history turns, message: {request.message[:50]}")
        async with self._slots:
            return await self.orchestrator.run(contents)
