"""Shared fixtures and fakes for all tests."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from weather_chat.clients.nws import NWSClient
from weather_chat.config import Settings
from weather_chat.models.llm import CompletionResponse, ConversationTurn, ToolDeclaration, ToolInvocationRequest

NWS_BASE = "https://api.weather.gov"
FORECAST_URL = f"{NWS_BASE}/gridpoints/SEW/124,67/forecast"


class FakeCompletionProvider:
    """Completion provider that replays scripted responses and records every call."""

    def __init__(self, *responses: CompletionResponse | Exception):
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    async def generate(
        self,
        contents: list[ConversationTurn],
        tools: list[ToolDeclaration] | None = None,
        allow_tool_calls: bool = True,
    ) -> CompletionResponse:
        self.calls.append({"contents": list(contents), "tools": tools, "allow_tool_calls": allow_tool_calls})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def text_response(text: str | None) -> CompletionResponse:
    return CompletionResponse(text=text, stop_reason="end_turn")


def tool_response(*calls: tuple[str, dict[str, Any]]) -> CompletionResponse:
    requests = [ToolInvocationRequest(id=f"toolu_{i}", name=name, args=args) for i, (name, args) in enumerate(calls)]
    return CompletionResponse(function_calls=requests, stop_reason="tool_use")


def make_period(number: int, name: str) -> dict[str, Any]:
    """A forecast period shaped like the NWS document."""
    return {
        "number": number,
        "name": name,
        "startTime": "2026-10-18T18:00:00-07:00",
        "isDaytime": number % 2 == 1,
        "temperature": 50 + number,
        "temperatureUnit": "F",
        "windSpeed": "5 mph",
        "windDirection": "SW",
        "icon": "https://api.weather.gov/icons/land/night/rain",
        "shortForecast": "Light Rain",
        "detailedForecast": f"{name}: light rain. Low around {50 + number}.",
    }


def points_document(forecast_url: str | None = FORECAST_URL) -> dict[str, Any]:
    properties: dict[str, Any] = {
        "gridId": "SEW",
        "relativeLocation": {"properties": {"city": "Seattle", "state": "WA"}},
    }
    if forecast_url:
        properties["forecast"] = forecast_url
    return {"properties": properties}


def forecast_document(count: int = 14) -> dict[str, Any]:
    names = ["Tonight", "Sunday", "Sunday Night", "Monday", "Monday Night", "Tuesday", "Tuesday Night"]
    return {"properties": {"periods": [make_period(i + 1, names[i % len(names)]) for i in range(count)]}}


class NWSStub:
    """httpx transport handler standing in for api.weather.gov."""

    def __init__(
        self,
        points: Callable[[httpx.Request], httpx.Response] | None = None,
        forecast: Callable[[httpx.Request], httpx.Response] | None = None,
    ):
        self.points = points or (lambda request: httpx.Response(200, json=points_document()))
        self.forecast = forecast or (lambda request: httpx.Response(200, json=forecast_document()))
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.startswith("/points/"):
            return self.points(request)
        if request.url.path.endswith("/forecast"):
            return self.forecast(request)
        return httpx.Response(404, json={"title": "Not Found"})


@pytest.fixture
def settings() -> Settings:
    return Settings(anthropic_api_key="test-key", forecast_base_url=NWS_BASE)


@pytest.fixture
def nws_stub() -> NWSStub:
    return NWSStub()


@pytest.fixture
def nws_client(settings: Settings, nws_stub: NWSStub) -> NWSClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(nws_stub), follow_redirects=True)
    return NWSClient(settings, http_client=http_client)
