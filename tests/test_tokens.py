"""Tests for the message token counter."""

from unittest.mock import Mock, patch

from weather_chat.utils.tokens import TokenCounter


class TestTokenCounter:
    """Tests for token estimation."""

    def test_counts_with_tokenizer(self):
        """Test that the loaded encoding is used for counting."""
        encoding = Mock()
        encoding.encode.return_value = [1, 2, 3]

        with patch("weather_chat.utils.tokens.tiktoken.get_encoding", return_value=encoding) as get_encoding:
            counter = TokenCounter()
            assert counter.count("hello world") == 3
            assert counter.count("again") == 3

        get_encoding.assert_called_once_with("cl100k_base")

    def test_falls_back_when_encoding_unavailable(self):
        """Test the character estimate when the encoding cannot be loaded."""
        with patch("weather_chat.utils.tokens.tiktoken.get_encoding", side_effect=OSError("offline")):
            counter = TokenCounter()
            assert counter.count("a" * 40) == 10

    def test_falls_back_when_encoding_fails(self):
        encoding = Mock()
        encoding.encode.side_effect = ValueError("disallowed special token")

        with patch("weather_chat.utils.tokens.tiktoken.get_encoding", return_value=encoding):
            assert TokenCounter().count("a" * 8) == 2

    def test_load_attempted_once(self):
        """Test that a failed load is not retried on every count."""
        with patch("weather_chat.utils.tokens.tiktoken.get_encoding", side_effect=OSError("offline")) as get_encoding:
            counter = TokenCounter()
            counter.count("one")
            counter.count("two")

        assert get_encoding.call_count == 1
