# georegions/core/geo/service.py
"""
GeoResolver: адрес <-> координаты через внешний геокодер (OpenCage API).
Один HTTP-запрос на разрешение, без кэша и повторов.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from georegions.common.constants import TypeMsg
from georegions.common.exceptions import ResolutionError
from georegions.common.logger import log_error, log_info
from georegions.shared.models.location import Address, Coordinates, LocationInput


class GeoResolver:
    """
    Адаптер к сервису геокодирования.

    Реализует:
    - Прямое геокодирование (адрес -> координаты)
    - Обратное геокодирование (координаты -> адрес)

    Берётся только первый (лучший) результат провайдера. Пустой ответ
    не считается ошибкой: возвращается исходный вход.
    """

    def __init__(
        self,
        api_key: str | None = None,
        url: str | None = None,
        language: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Инициализация адаптера.

        Args:
            api_key: API ключ провайдера (берётся из конфига если None)
            url: Адрес endpoint геокодирования
            language: Язык ответов
            timeout: Таймаут HTTP-запроса в секундах
        """
        if api_key is None or url is None or language is None or timeout is None:
            from georegions.config import settings
            api_key = api_key if api_key is not None else settings.geocoding.GEOCODING_API_KEY
            url = url or settings.geocoding.GEOCODING_URL
            language = language or settings.geocoding.GEOCODING_LANGUAGE
            timeout = timeout if timeout is not None else settings.geocoding.GEOCODING_TIMEOUT

        self._api_key = api_key
        self._url = url
        self._language = language
        self._client = httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Закрывает HTTP клиент."""
        await self._client.aclose()

    async def resolve_location(self, location: LocationInput) -> LocationInput:
        """
        Разрешает адрес в координаты или координаты в адрес.

        Args:
            location: Адрес и/или координаты. Адрес имеет приоритет.

        Returns:
            {coordinates} для адреса, {address} для координат,
            либо исходный вход, если провайдер ничего не нашёл

        Raises:
            ResolutionError: Провайдер недоступен или вернул ответ неожиданной формы
        """
        if location.address is not None:
            coordinates = await self.geocode(location.address)
            if coordinates is not None:
                return LocationInput(coordinates=coordinates)
        elif location.coordinates is not None:
            address = await self.reverse_geocode(location.coordinates)
            if address is not None:
                return LocationInput(address=address)

        return location

    async def geocode(self, address: Address) -> Optional[Coordinates]:
        """
        Прямое геокодирование: адрес -> координаты.

        Returns:
            Координаты первого результата или None
        """
        query = address.to_query()
        result = await self._first_result(query)
        if result is None:
            await log_info(
                f"Геокодирование не дало результатов для: {query}",
                type_msg=TypeMsg.WARNING,
            )
            return None

        geometry = result.get("geometry")
        if not isinstance(geometry, dict) or geometry.get("lat") is None or geometry.get("lng") is None:
            await log_error(f"Ответ геокодера без координат для: {query}")
            raise ResolutionError("Location resolution failed")

        try:
            return Coordinates(latitude=geometry["lat"], longitude=geometry["lng"])
        except ValidationError as e:
            await log_error(f"Некорректные координаты от геокодера: {e}")
            raise ResolutionError("Location resolution failed") from e

    async def reverse_geocode(self, coordinates: Coordinates) -> Optional[Address]:
        """
        Обратное геокодирование: координаты -> адрес.

        Строка formatted провайдера делится по ", ": первые три части
        становятся street, city и zipCode.

        Returns:
            Адрес первого результата или None
        """
        query = f"{coordinates.latitude},{coordinates.longitude}"
        result = await self._first_result(query)
        if result is None:
            await log_info(
                f"Обратное геокодирование не дало результатов для: {query}",
                type_msg=TypeMsg.WARNING,
            )
            return None

        formatted = result.get("formatted")
        if not isinstance(formatted, str) or not formatted:
            # Результат без адресной строки считается отсутствием совпадения
            await log_info(
                f"Обратное геокодирование вернуло результат без адреса для: {query}",
                type_msg=TypeMsg.WARNING,
            )
            return None

        return parse_formatted_address(formatted)

    async def _first_result(self, query: str) -> Optional[dict[str, Any]]:
        """Выполняет один запрос к провайдеру и возвращает первый результат."""
        if not self._api_key:
            await log_error("API ключ геокодера не настроен")
            raise ResolutionError("Geocoding API key is not configured")

        try:
            response = await self._client.get(
                self._url,
                params={
                    "q": query,
                    "key": self._api_key,
                    "language": self._language,
                    "limit": 1,
                },
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            await log_error(f"Ошибка резолвинга локации: {e}")
            raise ResolutionError("Location resolution failed") from e

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            await log_error(f"Неожиданный формат ответа геокодера: {type(data).__name__}")
            raise ResolutionError("Location resolution failed")

        if not results:
            return None
        if not isinstance(results[0], dict):
            await log_error("Неожиданный формат результата геокодера")
            raise ResolutionError("Location resolution failed")
        return results[0]


def parse_formatted_address(formatted: str) -> Address:
    """Разбирает строку вида "street, city, zipCode, ..." в Address."""
    parts = formatted.split(", ") if formatted else []
    parts += [None] * (3 - len(parts))
    street, city, zip_code = parts[:3]
    return Address(street=street, city=city, zip_code=zip_code)
