"""Mapbox geocoding client.

    client = GeocodingClient()
    address = await client.reverse(longitude=3.3792, latitude=6.5244)

Reverse geocoding retries any failure (network error, non-2xx response,
unparseable body) up to `max_retries` times, re-issuing the identical
request after linearly increasing delays: 1s, 2s, 3s by default.  Forward
search is a single attempt.

A missing access token raises ConfigurationError before any request is
made; it is never retried.
"""

import logging
from urllib.parse import quote

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from app.config import settings
from app.middleware.exceptions import ConfigurationError, ExternalServiceError
from app.schemas.geo import GeocodeResult

logger = logging.getLogger(__name__)

ADDRESS_NOT_FOUND = "Address not found"
PLACES_PATH = "/geocoding/v5/mapbox.places"


def retry_wait(delay: float):
    """Linear backoff: `delay`, 2 x `delay`, 3 x `delay`, ..."""
    return wait_incrementing(start=delay, increment=delay)


class GeocodingClient:
    """Client for the Mapbox places API with linear-backoff retries."""

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.access_token = settings.mapbox_access_token if access_token is None else access_token
        self.base_url = (base_url or settings.mapbox_base_url).rstrip("/")
        self.max_retries = settings.geocoding_max_retries if max_retries is None else max_retries
        self.retry_delay = (
            settings.geocoding_retry_delay_seconds if retry_delay is None else retry_delay
        )
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            headers={"accept": "application/json"},
            timeout=timeout or settings.http_timeout_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self.access_token)

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    def _require_token(self) -> None:
        if not self.access_token:
            raise ConfigurationError("Mapbox access token is not configured")

    async def _get_json(self, path: str, params: dict) -> dict:
        response = await self.client.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def reverse(self, longitude: float, latitude: float) -> str:
        """Human-readable address for a coordinate (`features[0].place_name`).

        Returns "Address not found" when the lookup succeeds with no features.

        Raises:
            ConfigurationError: no access token
            ExternalServiceError: every attempt failed
        """
        self._require_token()
        path = f"{PLACES_PATH}/{longitude},{latitude}.json"
        params = {"access_token": self.access_token}
        attempts = self.max_retries + 1

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(attempts),
                wait=retry_wait(self.retry_delay),
                retry=retry_if_exception_type((httpx.HTTPError, ValueError)),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    data = await self._get_json(path, params)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Reverse geocoding failed after {attempts} attempts: {e}")
            raise ExternalServiceError("Geocoding", f"reverse geocoding failed: {e}") from e

        features = data.get("features") or []
        if not features:
            return ADDRESS_NOT_FOUND
        return features[0].get("place_name") or ADDRESS_NOT_FOUND

    async def search(self, text: str) -> GeocodeResult | None:
        """Best match for a free-text place name, or None."""
        self._require_token()
        path = f"{PLACES_PATH}/{quote(text.strip(), safe='')}.json"
        try:
            data = await self._get_json(path, {"access_token": self.access_token, "limit": 1})
        except (httpx.HTTPError, ValueError) as e:
            raise ExternalServiceError("Geocoding", f"search failed: {e}") from e

        features = data.get("features") or []
        if not features:
            return None
        feature = features[0]
        center = feature.get("center") or [None, None]
        return GeocodeResult(
            place_name=feature.get("place_name") or text,
            longitude=center[0],
            latitude=center[1],
        )
