"""Main FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from weather_chat import __version__
from weather_chat.api.endpoints import router
from weather_chat.clients.anthropic import AnthropicClient
from weather_chat.clients.nws import NWSClient
from weather_chat.config import Settings
from weather_chat.graphs.orchestrator import CompletionOrchestrator
from weather_chat.models.chat import ErrorResponse
from weather_chat.services.chat import ChatService
from weather_chat.tools.registry import create_tools_registry
from weather_chat.utils.logging import LogConfig, get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the process-wide clients once and close them on shutdown."""
    settings = Settings.from_env()
    setup_logging(LogConfig(level=settings.log_level))

    async with httpx.AsyncClient(follow_redirects=True) as http_client:
        nws_client = NWSClient(settings, http_client=http_client)
        completion = AnthropicClient(settings)
        orchestrator = CompletionOrchestrator(
            completion,
            create_tools_registry(nws_client),
            max_tool_rounds=settings.max_tool_rounds,
        )
        app.state.chat_service = ChatService(
            orchestrator,
            max_concurrent_requests=settings.max_concurrent_requests,
            max_message_tokens=settings.max_message_tokens,
        )
        logger.info(f"Weather chat service started with model {settings.model}")
        try:
            yield
        finally:
            await completion.close()
            logger.info("Weather chat service stopped")


# Create FastAPI application
app = FastAPI(
    title="Weather Chat",
    description=(
        "A conversational service that answers questions with a language model "
        "and fetches US weather forecasts from the National Weather Service when needed."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Chat",
            "description": "Send a message with the prior conversation and receive the assistant's answer.",
        },
        {
            "name": "Health",
            "description": "Service health monitoring and status checks.",
        },
    ],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies in the same shape as other chat errors."""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request body: {location or 'body'}: {first.get('msg', 'invalid')}"
    logger.warning(message)
    return JSONResponse(status_code=422, content=ErrorResponse(error=message).model_dump())


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("weather_chat.main:app", host="0.0.0.0", port=3000, log_level="info")
