"""Client-facing request and response models."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ClientTurn(BaseModel):
    """A conversation turn as the chat client sends it."""

    model_config = ConfigDict(extra="ignore")

    role: str
    text: str


class ChatRequest(BaseModel):
    """Request model for the chat endpoint."""

    history: list[ClientTurn] = Field(default_factory=list)
    message: str


class ChatResponse(BaseModel):
    """Response model for the chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    tool_used: bool = Field(alias="toolUsed")


class ErrorResponse(BaseModel):
    """Error body returned for any failed chat request."""

    error: str


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str


@dataclass
class ChatOutcome:
    """Result of one orchestrated chat request."""

    text: str
    tool_used: bool
    tool_rounds: int = 0
