"""Tests for the Mapbox geocoding client (HTTP mocked with respx)."""

from types import SimpleNamespace

import httpx
import pytest
import pytest_asyncio
import respx

from app.middleware.exceptions import ConfigurationError, ExternalServiceError
from app.services.geocoding import ADDRESS_NOT_FOUND, GeocodingClient, retry_wait

MAPBOX_URL = "https://mapbox.test"
PLACES = f"{MAPBOX_URL}/geocoding/v5/mapbox.places/"

LAGOS = {
    "features": [
        {"place_name": "Ikeja, Lagos, Nigeria", "center": [3.3792, 6.5244]},
        {"place_name": "Lagos, Nigeria", "center": [3.4, 6.45]},
    ]
}


@pytest_asyncio.fixture
async def geocoder():
    client = GeocodingClient(access_token="pk.test", base_url=MAPBOX_URL, max_retries=3, retry_delay=0)
    yield client
    await client.close()


@pytest.mark.unit
class TestRetryWait:
    def test_linear_backoff_delays(self):
        wait = retry_wait(1.0)
        delays = [wait(SimpleNamespace(attempt_number=n)) for n in (1, 2, 3)]
        assert delays == [1.0, 2.0, 3.0]


@pytest.mark.integration
@pytest.mark.asyncio
class TestReverseGeocoding:
    @respx.mock
    async def test_returns_first_place_name(self, geocoder):
        route = respx.get(url__startswith=PLACES).mock(return_value=httpx.Response(200, json=LAGOS))

        address = await geocoder.reverse(longitude=3.3792, latitude=6.5244)

        assert address == "Ikeja, Lagos, Nigeria"
        request = route.calls.last.request
        assert request.url.path == "/geocoding/v5/mapbox.places/3.3792,6.5244.json"
        assert request.url.params["access_token"] == "pk.test"

    @respx.mock
    async def test_no_features(self, geocoder):
        respx.get(url__startswith=PLACES).mock(return_value=httpx.Response(200, json={"features": []}))

        assert await geocoder.reverse(longitude=0.5, latitude=0.5) == ADDRESS_NOT_FOUND

    @respx.mock
    async def test_retries_until_success(self, geocoder):
        route = respx.get(url__startswith=PLACES).mock(
            side_effect=[
                httpx.Response(500),
                httpx.ConnectError("connection reset"),
                httpx.Response(200, json=LAGOS),
            ]
        )

        address = await geocoder.reverse(longitude=3.3792, latitude=6.5244)

        assert address == "Ikeja, Lagos, Nigeria"
        assert route.call_count == 3
        urls = {str(call.request.url) for call in route.calls}
        assert len(urls) == 1

    @respx.mock
    async def test_gives_up_after_max_retries(self, geocoder):
        route = respx.get(url__startswith=PLACES).mock(return_value=httpx.Response(503))

        with pytest.raises(ExternalServiceError):
            await geocoder.reverse(longitude=3.3792, latitude=6.5244)

        assert route.call_count == 4

    @respx.mock
    async def test_missing_token_fails_before_any_request(self):
        route = respx.get(url__startswith=PLACES).mock(return_value=httpx.Response(200, json=LAGOS))
        client = GeocodingClient(access_token="", base_url=MAPBOX_URL, retry_delay=0)

        with pytest.raises(ConfigurationError):
            await client.reverse(longitude=3.3792, latitude=6.5244)

        assert route.call_count == 0
        assert not client.configured
        await client.close()


@pytest.mark.integration
@pytest.mark.asyncio
class TestSearch:
    @respx.mock
    async def test_first_match(self, geocoder):
        route = respx.get(url__startswith=PLACES).mock(return_value=httpx.Response(200, json=LAGOS))

        result = await geocoder.search("Ikeja")

        assert result.place_name == "Ikeja, Lagos, Nigeria"
        assert result.longitude == 3.3792
        assert result.latitude == 6.5244
        assert route.calls.last.request.url.params["limit"] == "1"

    @respx.mock
    async def test_no_match(self, geocoder):
        respx.get(url__startswith=PLACES).mock(return_value=httpx.Response(200, json={"features": []}))

        assert await geocoder.search("Atlantis") is None

    @respx.mock
    async def test_search_is_not_retried(self, geocoder):
        route = respx.get(url__startswith=PLACES).mock(return_value=httpx.Response(500))

        with pytest.raises(ExternalServiceError):
            await geocoder.search("Ikeja")

        assert route.call_count == 1
