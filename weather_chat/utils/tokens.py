"""Token estimation for client message size checks."""

import tiktoken

from weather_chat.utils.logging import get_logger

logger = get_logger(__name__)


class TokenCounter:
    """Approximate token counter backed by tiktoken.

    The encoding is loaded on first use; if it cannot be loaded the counter
    falls back to roughly four characters per token.
    """

    tokenizer: tiktoken.Encoding | None = None

    def __init__(self, encoding_name: str = "cl100k_base"):
        """Initialize the counter.

        Args:
            encoding_name: tiktoken encoding used as a close approximation for Claude
        """
        self.encoding_name = encoding_name
        self._loaded = False

    def _get_tokenizer(self) -> tiktoken.Encoding | None:
        if not self._loaded and self.tokenizer is None:
            self._loaded = True
            try:
                self.tokenizer = tiktoken.get_encoding(self.encoding_name)
            except Exception as e:
                logger.warning(f"Tokenizer {self.encoding_name} unavailable, using character estimate: {e}")
        return self.tokenizer

    def count(self, text: str) -> int:
        """Estimate token count for a piece of text."""
        tokenizer = self._get_tokenizer()
        try:
            return len(tokenizer.encode(text)) if tokenizer else len(text) // 4
        except Exception:
            # Fallback: roughly 4 characters per token
            return len(text) // 4
