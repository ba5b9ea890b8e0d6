"""Process-wide configuration, read once at startup."""

import os
from dataclasses import dataclass, field

from weather_chat.errors import ConfigurationError
from weather_chat.utils.logging import LEVELS

DEFAULT_SYSTEM_PROMPT = (
    "You are a friendly weather assistant. "
    "Use the get_weather tool when the user asks about the weather or forecast for a place; "
    "supply the place's latitude and longitude yourself. "
    "The forecast service only covers the United States. "
    "If the tool reports an error, explain it to the user in plain language."
)

MAX_TOOL_ROUNDS_CAP = 3


@dataclass(frozen=True)
class Settings:
    """Immutable service configuration shared by the orchestrator and the adapters."""

    anthropic_api_key: str = field(repr=False)
    model: str = "claude-3-5-sonnet-20241022"
    max_tokens: int = 1024
    temperature: float = 0.1
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    completion_timeout: float = 30.0

    forecast_base_url: str = "https://api.weather.gov"
    forecast_timeout: float = 10.0
    user_agent: str = "weather-chat/0.1 (github.com/weather-chat)"

    max_tool_rounds: int = 1
    max_concurrent_requests: int = 32
    max_message_tokens: int = 2000
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.anthropic_api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY environment variable is required")
        # Tool rounds always stay within 1..MAX_TOOL_ROUNDS_CAP
        clamped = min(max(self.max_tool_rounds, 1), MAX_TOOL_ROUNDS_CAP)
        object.__setattr__(self, "max_tool_rounds", clamped)
        if self.max_concurrent_requests < 1:
            raise ConfigurationError("max_concurrent_requests must be at least 1")
        log_level = self.log_level.strip().upper()
        if log_level not in LEVELS:
            raise ConfigurationError(f"LOG_LEVEL must be one of {', '.join(LEVELS)}")
        object.__setattr__(self, "log_level", log_level)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        try:
            return cls(
                anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
                model=os.getenv("WEATHER_CHAT_MODEL", cls.model),
                max_tokens=int(os.getenv("WEATHER_CHAT_MAX_TOKENS", cls.max_tokens)),
                temperature=float(os.getenv("WEATHER_CHAT_TEMPERATURE", cls.temperature)),
                system_prompt=os.getenv("WEATHER_CHAT_SYSTEM_PROMPT", cls.system_prompt),
                completion_timeout=float(os.getenv("WEATHER_CHAT_COMPLETION_TIMEOUT", cls.completion_timeout)),
                forecast_base_url=os.getenv("NWS_API_BASE", cls.forecast_base_url),
                forecast_timeout=float(os.getenv("NWS_TIMEOUT", cls.forecast_timeout)),
                user_agent=os.getenv("NWS_USER_AGENT", cls.user_agent),
                max_tool_rounds=int(os.getenv("WEATHER_CHAT_MAX_TOOL_ROUNDS", cls.max_tool_rounds)),
                max_concurrent_requests=int(
                    os.getenv("WEATHER_CHAT_MAX_CONCURRENT_REQUESTS", cls.max_concurrent_requests)
                ),
                max_message_tokens=int(os.getenv("WEATHER_CHAT_MAX_MESSAGE_TOKENS", cls.max_message_tokens)),
                log_level=os.getenv("LOG_LEVEL", cls.log_level),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e
