"""Translation of client conversation history into completion-provider turns."""

from collections.abc import Sequence

from weather_chat.errors import ValidationError
from weather_chat.models.chat import ClientTurn
from weather_chat.models.llm import ConversationTurn

CLIENT_ROLES = frozenset({"user", "model"})


def translate_history(history: Sequence[ClientTurn], message: str) -> list[ConversationTurn]:
    """Build the ordered turn sequence for the completion provider.

    History is kept as sent, in order and untruncated; the new message is
    appended as the final user turn.

    Args:
        history: Prior turns as sent by the client
        message: The new user message

    Returns:
        Translated turns, ending with the new user turn

    Raises:
        ValidationError: A history turn has a role other than user or model or blank text, or the message is blank
    """
    if not message.strip():
        raise ValidationError("Message must not be empty")

    contents: list[ConversationTurn] = []
    for index, turn in enumerate(history):
        if turn.role not in CLIENT_ROLES:
            raise ValidationError(f"Invalid role '{turn.role}' in history at position {index}; expected user or model")
        if not turn.text.strip():
            raise ValidationError(f"Empty {turn.role} turn in history at position {index}")
        contents.append(ConversationTurn.user(turn.text) if turn.role == "user" else ConversationTurn.reply(turn.text))

    contents.append(ConversationTurn.user(message))
    return contents
