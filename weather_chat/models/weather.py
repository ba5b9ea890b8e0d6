"""Forecast data models for the NWS adapter."""

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ForecastPeriod(BaseModel):
    """One forecast period, trimmed from the NWS forecast document."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    number: int | None = None
    name: str
    detailed_forecast: str = Field(alias="detailedForecast")
    short_forecast: str | None = Field(default=None, alias="shortForecast")
    temperature: int | float | None = None
    temperature_unit: str | None = Field(default=None, alias="temperatureUnit")
    wind_speed: str | None = Field(default=None, alias="windSpeed")
    wind_direction: str | None = Field(default=None, alias="windDirection")
    is_daytime: bool | None = Field(default=None, alias="isDaytime")


@dataclass(frozen=True)
class ForecastPoint:
    """Stage one result: a coordinate resolved to its forecast endpoint."""

    latitude: float
    longitude: float
    forecast_url: str
    city: str | None = None
    state: str | None = None


@dataclass(frozen=True)
class LocationUnsupported:
    """Stage one result: the forecast provider has no coverage for the coordinate."""

    latitude: float
    longitude: float

    @property
    def message(self) -> str:
        return (
            f"Location ({self.latitude}, {self.longitude}) is not covered. "
            "The National Weather Service only supports locations within the United States."
        )


class ForecastResult(BaseModel):
    """Outcome of a forecast lookup: up to three periods, or an error descriptor."""

    periods: list[ForecastPeriod] = Field(default_factory=list)
    error: str | None = None
    kind: Literal["location_unsupported", "upstream_error"] | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_payload(self) -> dict[str, Any]:
        """Tool-result payload handed back to the completion provider."""
        if self.error is not None:
            return {"error": self.error, "kind": self.kind}
        return {"periods": [period.model_dump(exclude_none=True) for period in self.periods]}
