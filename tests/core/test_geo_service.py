# tests/core/test_geo_service.py
"""
Тесты для GeoResolver.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from georegions.common.exceptions import ResolutionError
from georegions.core.geo.service import GeoResolver, parse_formatted_address
from georegions.shared.models.location import Address, Coordinates, LocationInput


def make_response(payload: Any) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status = MagicMock()
    return response


class TestParseFormattedAddress:
    """Тесты разбора строки formatted."""

    def test_three_parts(self) -> None:
        address = parse_formatted_address("Liberty Island, New York, 10004, United States of America")

        assert address.street == "Liberty Island"
        assert address.city == "New York"
        assert address.zip_code == "10004"

    def test_short_string(self) -> None:
        """Недостающие части остаются пустыми."""
        address = parse_formatted_address("Liberty Island")

        assert address.street == "Liberty Island"
        assert address.city is None
        assert address.zip_code is None

    def test_empty_string(self) -> None:
        assert parse_formatted_address("") == Address()


class TestGeoResolver:
    """Тесты для GeoResolver."""

    @pytest.fixture
    def resolver(self) -> GeoResolver:
        return GeoResolver(
            api_key="test_api_key",
            url="https://geocoder.test/v1/json",
            language="en",
            timeout=5.0,
        )

    def test_init_from_settings(self) -> None:
        """Недостающие параметры берутся из конфига."""
        with patch("georegions.config.settings") as mock_settings:
            mock_settings.geocoding.GEOCODING_API_KEY = "config_key"
            mock_settings.geocoding.GEOCODING_URL = "https://config.test/json"
            mock_settings.geocoding.GEOCODING_LANGUAGE = "pt"
            mock_settings.geocoding.GEOCODING_TIMEOUT = 3.0

            resolver = GeoResolver()

        assert resolver._api_key == "config_key"
        assert resolver._url == "https://config.test/json"
        assert resolver._language == "pt"

    @pytest.mark.asyncio
    async def test_close(self, resolver: GeoResolver) -> None:
        await resolver.close()
        assert resolver._client.is_closed

    @pytest.mark.asyncio
    async def test_address_resolves_to_coordinates(self, resolver: GeoResolver) -> None:
        """Адрес разрешается в координаты первого результата."""
        resolver._client.get = AsyncMock(return_value=make_response({
            "results": [
                {"geometry": {"lat": 40.689247, "lng": -74.044502}},
                {"geometry": {"lat": 0.0, "lng": 0.0}},
            ],
        }))

        result = await resolver.resolve_location(LocationInput(
            address=Address(street="Liberty Island", city="New York", zip_code="10004"),
        ))

        assert result.coordinates == Coordinates(latitude=40.689247, longitude=-74.044502)
        assert result.address is None

        params = resolver._client.get.call_args.kwargs["params"]
        assert params["q"] == "Liberty Island, New York, 10004"
        assert params["key"] == "test_api_key"
        assert params["limit"] == 1

    @pytest.mark.asyncio
    async def test_coordinates_resolve_to_address(self, resolver: GeoResolver) -> None:
        """Координаты разрешаются в адрес из строки formatted."""
        resolver._client.get = AsyncMock(return_value=make_response({
            "results": [{"formatted": "Liberty Island, New York, 10004, United States of America"}],
        }))

        result = await resolver.resolve_location(LocationInput(
            coordinates=Coordinates(latitude=40.689247, longitude=-74.044502),
        ))

        assert result.address == Address(street="Liberty Island", city="New York", zip_code="10004")
        assert result.coordinates is None
        assert resolver._client.get.call_args.kwargs["params"]["q"] == "40.689247,-74.044502"

    @pytest.mark.asyncio
    async def test_address_has_priority(self, resolver: GeoResolver) -> None:
        """При обоих полях используется адрес."""
        resolver._client.get = AsyncMock(return_value=make_response({
            "results": [{"geometry": {"lat": 1.0, "lng": 2.0}}],
        }))

        result = await resolver.resolve_location(LocationInput(
            address=Address(street="A", city="B", zip_code="C"),
            coordinates=Coordinates(latitude=10.0, longitude=20.0),
        ))

        assert result.coordinates == Coordinates(latitude=1.0, longitude=2.0)

    @pytest.mark.asyncio
    async def test_no_results_returns_input(self, resolver: GeoResolver) -> None:
        """Пустой ответ провайдера возвращает исходный вход."""
        resolver._client.get = AsyncMock(return_value=make_response({"results": []}))
        location = LocationInput(address=Address(street="Nowhere", city="Void", zip_code="0"))

        assert await resolver.resolve_location(location) == location

    @pytest.mark.asyncio
    async def test_empty_input_returned_as_is(self, resolver: GeoResolver) -> None:
        resolver._client.get = AsyncMock()

        assert await resolver.resolve_location(LocationInput()) == LocationInput()
        resolver._client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_http_error_raises_resolution_error(self, resolver: GeoResolver) -> None:
        """Ошибка сети становится ResolutionError."""
        resolver._client.get = AsyncMock(side_effect=httpx.ConnectTimeout("timeout"))

        with pytest.raises(ResolutionError, match="Location resolution failed"):
            await resolver.geocode(Address(street="A", city="B", zip_code="C"))

    @pytest.mark.asyncio
    async def test_auth_error_raises_resolution_error(self, resolver: GeoResolver) -> None:
        """Ответ 401 провайдера становится ResolutionError."""
        request = httpx.Request("GET", "https://geocoder.test/v1/json")
        response = httpx.Response(401, request=request)
        resolver._client.get = AsyncMock(return_value=response)

        with pytest.raises(ResolutionError):
            await resolver.reverse_geocode(Coordinates(latitude=1.0, longitude=2.0))

    @pytest.mark.asyncio
    async def test_missing_api_key(self) -> None:
        resolver = GeoResolver(api_key="", url="https://geocoder.test", language="en", timeout=1.0)

        with pytest.raises(ResolutionError, match="API key"):
            await resolver.geocode(Address(street="A", city="B", zip_code="C"))

    @pytest.mark.asyncio
    async def test_partial_address_query(self, resolver: GeoResolver) -> None:
        """Недостающие части адреса не уходят провайдеру строкой "None"."""
        resolver._client.get = AsyncMock(return_value=make_response({"results": []}))

        await resolver.geocode(Address(city="Boston", zip_code="02108"))

        assert resolver._client.get.call_args.kwargs["params"]["q"] == "Boston, 02108"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "result",
        [
            {"formatted": "Liberty Island, New York"},
            {"geometry": None},
            {"geometry": {"lat": 40.689247}},
            {"geometry": {"lat": None, "lng": -74.044502}},
        ],
    )
    async def test_result_without_geometry(self, resolver: GeoResolver, result: dict) -> None:
        """Результат без координат это ошибка провайдера, а не KeyError."""
        resolver._client.get = AsyncMock(return_value=make_response({"results": [result]}))

        with pytest.raises(ResolutionError, match="Location resolution failed"):
            await resolver.geocode(Address(street="Liberty Island", city="New York", zip_code="10004"))

    @pytest.mark.asyncio
    async def test_out_of_range_geometry(self, resolver: GeoResolver) -> None:
        resolver._client.get = AsyncMock(return_value=make_response({
            "results": [{"geometry": {"lat": 400.0, "lng": 0.0}}],
        }))

        with pytest.raises(ResolutionError):
            await resolver.geocode(Address(street="A", city="B", zip_code="C"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [[], "error", None, {"results": "none"}, {"results": [None]}, {"results": ["x"]}],
    )
    async def test_malformed_payload(self, resolver: GeoResolver, payload: Any) -> None:
        """Ответ 200 неожиданной формы становится ResolutionError."""
        resolver._client.get = AsyncMock(return_value=make_response(payload))

        with pytest.raises(ResolutionError, match="Location resolution failed"):
            await resolver.reverse_geocode(Coordinates(latitude=1.0, longitude=2.0))

    @pytest.mark.asyncio
    async def test_missing_results_key_raises(self, resolver: GeoResolver) -> None:
        resolver._client.get = AsyncMock(return_value=make_response({"status": {"code": 200}}))

        with pytest.raises(ResolutionError):
            await resolver.geocode(Address(street="A", city="B", zip_code="C"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("result", [{}, {"formatted": ""}, {"formatted": None}])
    async def test_result_without_formatted_returns_input(self, resolver: GeoResolver, result: dict) -> None:
        """Результат без адресной строки: как отсутствие совпадения, вход без изменений."""
        resolver._client.get = AsyncMock(return_value=make_response({"results": [result]}))
        location = LocationInput(coordinates=Coordinates(latitude=40.689247, longitude=-74.044502))

        assert await resolver.resolve_location(location) == location
