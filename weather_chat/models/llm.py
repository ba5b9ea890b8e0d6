"""Provider-agnostic conversation and tool-calling models."""

from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def _new_call_id() -> str:
    return f"call_{uuid4().hex[:16]}"


class ToolInvocationRequest(BaseModel):
    """A model-issued request to run a named tool."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_call_id)
    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class TextPart(BaseModel):
    """Plain text content."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class FunctionCallPart(BaseModel):
    """Records a tool invocation request inside a model turn."""

    model_config = ConfigDict(frozen=True)

    type: Literal["function_call"] = "function_call"
    call: ToolInvocationRequest


class FunctionResponsePart(BaseModel):
    """Carries a tool result back to the model."""

    model_config = ConfigDict(frozen=True)

    type: Literal["function_response"] = "function_response"
    call_id: str
    name: str
    response: dict[str, Any]

    @property
    def is_error(self) -> bool:
        return "error" in self.response


Part = Annotated[TextPart | FunctionCallPart | FunctionResponsePart, Field(discriminator="type")]


class ConversationTurn(BaseModel):
    """One immutable turn of the conversation sent to the completion provider."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "model", "function"]
    parts: tuple[Part, ...]

    @classmethod
    def user(cls, text: str) -> "ConversationTurn":
        return cls(role="user", parts=(TextPart(text=text),))

    @classmethod
    def reply(cls, text: str) -> "ConversationTurn":
        return cls(role="model", parts=(TextPart(text=text),))

    @classmethod
    def function_call(cls, call: ToolInvocationRequest) -> "ConversationTurn":
        return cls(role="model", parts=(FunctionCallPart(call=call),))

    @classmethod
    def function_response(cls, call: ToolInvocationRequest, response: dict[str, Any]) -> "ConversationTurn":
        return cls(
            role="function",
            parts=(FunctionResponsePart(call_id=call.id, name=call.name, response=response),),
        )

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(part.text for part in self.parts if isinstance(part, TextPart))


class ToolDeclaration(BaseModel):
    """Schema description of a tool, as offered to the completion provider."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: dict[str, Any]


class CompletionResponse(BaseModel):
    """Provider-agnostic result of one completion call."""

    text: str | None = None
    function_calls: list[ToolInvocationRequest] = Field(default_factory=list)
    stop_reason: str | None = None
    model: str | None = None
