"""Tests for API endpoints."""

import asyncio
from unittest.mock import AsyncMock, Mock

import httpx
import pytest
from conftest import FakeCompletionProvider, text_response, tool_response
from fastapi.testclient import TestClient

from weather_chat.api import endpoints
from weather_chat.api.endpoints import _disconnected, get_chat_service
from weather_chat.errors import UpstreamModelError
from weather_chat.graphs.orchestrator import CompletionOrchestrator
from weather_chat.main import app
from weather_chat.models.chat import ChatRequest
from weather_chat.services.chat import ChatService
from weather_chat.tools.registry import create_tools_registry

client = TestClient(app)


@pytest.fixture
def use_provider(nws_client):
    """Install a chat service built around a scripted completion provider."""

    def install(*responses):
        provider = FakeCompletionProvider(*responses)
        orchestrator = CompletionOrchestrator(provider, create_tools_registry(nws_client))
        counter = Mock()
        counter.count.side_effect = lambda text: len(text) // 4
        service = ChatService(orchestrator, max_message_tokens=100, token_counter=counter)
        app.dependency_overrides[get_chat_service] = lambda: service
        return provider

    yield install
    app.dependency_overrides.clear()


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_check_returns_200(self):
        """Test that health check returns 200 status."""
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_check_response_structure(self):
        """Test that health check returns expected JSON structure."""
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert "timestamp" in data


class TestChatEndpoint:
    """Tests for the chat endpoint."""

    def test_plain_answer(self, use_provider):
        """Scenario A over HTTP."""
        use_provider(text_response("Hi! Ask me about the weather."))

        response = client.post("/api/chat", json={"history": [], "message": "Hello"})

        assert response.status_code == 200
        assert response.json() == {"text": "Hi! Ask me about the weather.", "toolUsed": False}

    def test_weather_answer(self, use_provider):
        """Scenario B over HTTP."""
        use_provider(
            tool_response(("get_weather", {"latitude": 47.6, "longitude": -122.3})),
            text_response("Expect light rain tonight."),
        )

        response = client.post("/api/chat", json={"history": [], "message": "Weather in Seattle?"})

        assert response.status_code == 200
        assert response.json() == {"text": "Expect light rain tonight.", "toolUsed": True}

    def test_unsupported_location_answer(self, use_provider, nws_stub):
        """Scenario C over HTTP: still a successful tool-assisted answer."""
        nws_stub.points = lambda request: httpx.Response(404)
        use_provider(
            tool_response(("get_weather", {"latitude": 48.85, "longitude": 2.35})),
            text_response("I can only look up US forecasts."),
        )

        response = client.post("/api/chat", json={"message": "Weather in Paris?"})

        assert response.status_code == 200
        assert response.json()["toolUsed"] is True

    def test_provider_outage(self, use_provider, nws_stub):
        """Scenario D over HTTP: 500 with an error message and no adapter call."""
        use_provider(UpstreamModelError())

        response = client.post("/api/chat", json={"history": [], "message": "Weather?"})

        assert response.status_code == 500
        assert response.json() == {"error": UpstreamModelError.public_message}
        assert nws_stub.requests == []

    def test_unexpected_error_is_opaque(self, use_provider):
        """Test that internal failures never leak their detail."""
        use_provider(RuntimeError("secret stack detail"))

        response = client.post("/api/chat", json={"message": "Hello"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}

    def test_unknown_tool(self, use_provider):
        """Test that an unregistered tool request fails the request."""
        use_provider(tool_response(("launch_rocket", {})))

        response = client.post("/api/chat", json={"message": "Launch"})

        assert response.status_code == 500
        assert "launch_rocket" in response.json()["error"]

    def test_history_sent_by_client(self, use_provider):
        """Test the body the reference web client sends, including extra fields."""
        provider = use_provider(text_response("You said hi."))
        body = {
            "history": [
                {"role": "user", "text": "hi", "timestamp": 1760000000000},
                {"role": "model", "text": "Hello!", "timestamp": 1760000001000},
            ],
            "message": "What did I say?",
        }

        response = client.post("/api/chat", json=body)

        assert response.status_code == 200
        assert [turn.role for turn in provider.calls[0]["contents"]] == ["user", "model", "user"]

    def test_invalid_role(self, use_provider):
        """Test that an unknown role is a 400 with a descriptive message."""
        provider = use_provider()

        response = client.post("/api/chat", json={"history": [{"role": "system", "text": "x"}], "message": "Hi"})

        assert response.status_code == 400
        assert "system" in response.json()["error"]
        assert provider.calls == []

    def test_blank_history_turn(self, use_provider):
        """Test that a history turn without text is rejected before the provider is called."""
        provider = use_provider()
        body = {"history": [{"role": "user", "text": "a"}, {"role": "model", "text": ""}], "message": "b"}

        response = client.post("/api/chat", json=body)

        assert response.status_code == 400
        assert "position 1" in response.json()["error"]
        assert provider.calls == []

    def test_empty_message(self, use_provider):
        use_provider()

        response = client.post("/api/chat", json={"message": "  "})

        assert response.status_code == 400
        assert response.json() == {"error": "Message must not be empty"}

    def test_message_too_long(self, use_provider):
        use_provider()

        response = client.post("/api/chat", json={"message": "word " * 200})

        assert response.status_code == 400
        assert "too long" in response.json()["error"]

    def test_missing_message(self, use_provider):
        """Test that structurally invalid bodies use the error shape."""
        use_provider()

        response = client.post("/api/chat", json={"history": []})

        assert response.status_code == 422
        assert "message" in response.json()["error"]


class TestDisconnect:
    """Tests for cancellation when the client goes away."""

    @pytest.mark.asyncio
    async def test_disconnect_detected(self):
        """Test that a disconnect is reported while the task is still running."""
        request = Mock()
        request.is_disconnected = AsyncMock(return_value=True)
        task = asyncio.create_task(asyncio.sleep(10))

        try:
            assert await _disconnected(request, task) is True
        finally:
            task.cancel()

    @pytest.mark.asyncio
    async def test_finished_task_not_disconnected(self):
        request = Mock()
        request.is_disconnected = AsyncMock(return_value=False)
        task = asyncio.create_task(asyncio.sleep(0))

        assert await _disconnected(request, task) is False
        request.is_disconnected.assert_not_called()

    @pytest.mark.asyncio
    async def test_disconnect_cancels_chat(self, monkeypatch):
        """Test that a client disconnect cancels the in-flight chat and returns 499."""
        monkeypatch.setattr(endpoints, "DISCONNECT_POLL_INTERVAL", 0.01)
        started = asyncio.Event()
        cancelled = []

        async def hang(request):
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.append(request.message)
                raise

        service = Mock()
        service.handle = hang
        http_request = Mock()
        http_request.is_disconnected = AsyncMock(side_effect=lambda: started.is_set())

        response = await endpoints.handle_chat(ChatRequest(message="Weather?"), http_request, service)

        assert response.status_code == 499
        assert cancelled == ["Weather?"]


class TestAPIDocumentation:
    """Tests for API documentation endpoints."""

    def test_openapi_json_available(self):
        response = client.get("/openapi.json")
        assert response.status_code == 200
        assert "/api/chat" in response.json()["paths"]

    def test_swagger_ui_available(self):
        response = client.get("/docs")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
