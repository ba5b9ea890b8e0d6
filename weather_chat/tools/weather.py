"""Weather forecast tool."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from weather_chat.clients.nws import NWSClient
from weather_chat.tools.base import ToolDefinition
from weather_chat.utils.logging import get_logger

logger = get_logger(__name__)

WEATHER_TOOL_NAME = "get_weather"
WEATHER_TOOL_DESCRIPTION = (
    "Get the forecast for a specific location using latitude and longitude. "
    "NOTE: This API only supports locations within the United States."
)


class WeatherInput(BaseModel):
    """Input schema for the weather tool."""

    model_config = ConfigDict(extra="ignore")

    latitude: float = Field(..., ge=-90, le=90, description="The latitude of the location.")
    longitude: float = Field(..., ge=-180, le=180, description="The longitude of the location.")


def create_weather_tool(nws_client: NWSClient) -> ToolDefinition:
    async def get_weather_handler(params: WeatherInput) -> dict[str, Any]:
        logger.info(f"Executing tool: {WEATHER_TOOL_NAME} ({params.latitude}, {params.longitude})")
        result = await nws_client.get_forecast(params.latitude, params.longitude)
        return result.to_payload()

    return ToolDefinition(
        name=WEATHER_TOOL_NAME,
        description=WEATHER_TOOL_DESCRIPTION,
        input_schema_class=WeatherInput,
        handler=get_weather_handler,
    )
