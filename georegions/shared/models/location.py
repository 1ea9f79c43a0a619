# georegions/shared/models/location.py
"""
Value-типы геолокации: координаты и почтовый адрес.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """
    Точка на сфере (центроид региона или местоположение пользователя).

    Сравнение строгое: две точки равны только при побитово равных
    latitude и longitude. Округление не применяется.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0, description="Широта")
    longitude: float = Field(..., ge=-180.0, le=180.0, description="Долгота")

    def as_tuple(self) -> tuple[float, float]:
        """Пара (latitude, longitude)."""
        return (self.latitude, self.longitude)


class Address(BaseModel):
    """Почтовый адрес."""

    model_config = ConfigDict(populate_by_name=True)

    street: Optional[str] = Field(None, description="Улица и дом")
    city: Optional[str] = Field(None, description="Город")
    zip_code: Optional[str] = Field(None, alias="zipCode", description="Почтовый индекс")

    def to_query(self) -> str:
        """Строка запроса для геокодера: "street, city, zipCode" без пустых частей."""
        return ", ".join(part for part in (self.street, self.city, self.zip_code) if part)


class LocationInput(BaseModel):
    """Вход и выход GeoResolver: адрес и/или координаты."""

    address: Optional[Address] = None
    coordinates: Optional[Coordinates] = None
