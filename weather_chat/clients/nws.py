"""National Weather Service API client: coordinate → forecast endpoint → periods."""

from typing import Any

import httpx

from weather_chat.config import Settings
from weather_chat.errors import UpstreamDependencyError
from weather_chat.models.weather import ForecastPeriod, ForecastPoint, ForecastResult, LocationUnsupported
from weather_chat.utils.logging import get_logger

logger = get_logger(__name__)

MAX_FORECAST_PERIODS = 3


class NWSClient:
    """Two-step forecast lookup against api.weather.gov.

    Stage one resolves a coordinate to a forecast endpoint; stage two fetches
    that endpoint. Each stage has its own typed result so callers can tell a
    coverage gap apart from an upstream failure.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None):
        """Initialize the client.

        Args:
            settings: Service settings (base URL, timeout, user agent)
            http_client: Shared async HTTP client; one is created if omitted
        """
        self.base_url = settings.forecast_base_url.rstrip("/")
        self.timeout = settings.forecast_timeout
        self.headers = {"User-Agent": settings.user_agent, "Accept": "application/geo+json"}
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(follow_redirects=True)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self.http_client.aclose()

    async def _get(self, url: str) -> httpx.Response:
        try:
            return await self.http_client.get(url, headers=self.headers, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise UpstreamDependencyError(f"NWS request failed: {type(e).__name__}") from e

    @staticmethod
    def _json(response: httpx.Response, stage: str) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamDependencyError(f"NWS {stage} API returned invalid JSON") from e
        if not isinstance(data, dict):
            raise UpstreamDependencyError(f"NWS {stage} API returned an unexpected document")
        return data

    async def resolve_point(self, latitude: float, longitude: float) -> ForecastPoint | LocationUnsupported:
        """Resolve a coordinate pair to its forecast endpoint.

        Returns:
            ForecastPoint on success, LocationUnsupported when the NWS answers 404

        Raises:
            UpstreamDependencyError: Any other failure
        """
        url = f"{self.base_url}/points/{latitude:.4f},{longitude:.4f}"
        logger.debug(f"Resolving NWS point: {url}")
        response = await self._get(url)

        if response.status_code == 404:
            logger.info(f"NWS has no coverage for ({latitude}, {longitude})")
            return LocationUnsupported(latitude=latitude, longitude=longitude)

        if not response.is_success:
            raise UpstreamDependencyError(f"NWS Points API Error: {response.status_code}")

        properties = self._json(response, "Points").get("properties") or {}
        forecast_url = properties.get("forecast")
        if not forecast_url:
            raise UpstreamDependencyError("No forecast URL found.")

        location = (properties.get("relativeLocation") or {}).get("properties") or {}
        return ForecastPoint(
            latitude=latitude,
            longitude=longitude,
            forecast_url=forecast_url,
            city=location.get("city"),
            state=location.get("state"),
        )

    async def fetch_forecast(self, point: ForecastPoint) -> list[ForecastPeriod]:
        """Fetch the forecast document and keep the first periods in document order.

        Raises:
            UpstreamDependencyError: Bad status or a document without periods
        """
        logger.debug(f"Fetching NWS forecast: {point.forecast_url}")
        response = await self._get(point.forecast_url)

        if not response.is_success:
            raise UpstreamDependencyError(f"NWS Forecast API Error: {response.status_code} {response.reason_phrase}")

        periods = (self._json(response, "Forecast").get("properties") or {}).get("periods")
        if not isinstance(periods, list):
            raise UpstreamDependencyError("NWS forecast document has no periods.")

        try:
            return [ForecastPeriod.model_validate(period) for period in periods[:MAX_FORECAST_PERIODS]]
        except ValueError as e:
            raise UpstreamDependencyError("NWS forecast periods are malformed.") from e

    async def get_forecast(self, latitude: float, longitude: float) -> ForecastResult:
        """Run both stages and report failures as data instead of raising."""
        try:
            point = await self.resolve_point(latitude, longitude)
            if isinstance(point, LocationUnsupported):
                return ForecastResult(error=point.message, kind="location_unsupported")

            periods = await self.fetch_forecast(point)
        except UpstreamDependencyError as e:
            logger.error(f"Weather lookup failed for ({latitude}, {longitude}): {e}")
            return ForecastResult(error=str(e), kind="upstream_error")

        logger.info(f"Fetched {len(periods)} forecast periods for ({latitude}, {longitude})")
        return ForecastResult(periods=periods)
