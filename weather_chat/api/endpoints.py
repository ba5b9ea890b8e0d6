"""API endpoints for the weather chat service."""

import asyncio
import contextlib
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from weather_chat import __version__
from weather_chat.models.chat import ChatRequest, ChatResponse, ErrorResponse, HealthResponse
from weather_chat.services.chat import ChatService
from weather_chat.services.synthesizer import synthesize_error, synthesize_response
from weather_chat.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

DISCONNECT_POLL_INTERVAL = 0.5
CLIENT_CLOSED_REQUEST = 499


def get_chat_service(request: Request) -> ChatService:
    """Chat service built at startup."""
    return request.app.state.chat_service


async def _disconnected(request: Request, task: asyncio.Task) -> bool:
    """Wait for the task, checking periodically whether the client went away."""
    while True:
        done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_INTERVAL)
        if done:
            return False
        if await request.is_disconnected():
            return True


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Chat"],
)
async def handle_chat(
    request: ChatRequest,
    http_request: Request,
    chat_service: ChatService = Depends(get_chat_service),
):
    """Answer a chat message, calling the weather tool when the model asks for it.

    Upstream calls are cancelled if the client disconnects before the answer is ready.
    """
    task = asyncio.create_task(chat_service.handle(request))
    try:
        if await _disconnected(http_request, task):
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            logger.info("Client disconnected; cancelled in-flight chat request")
            return Response(status_code=CLIENT_CLOSED_REQUEST)
        outcome = task.result()
    except Exception as e:
        status_code, body = synthesize_error(e)
        return JSONResponse(status_code=status_code, content=body.model_dump())
    finally:
        if not task.done():
            task.cancel()

    logger.info(f"Chat answered: tool_used={outcome.tool_used}, text: {outcome.text[:50]}")
    return synthesize_response(outcome)


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
    )
