# georegions/core/regions/queries.py
"""
Геозапросы по регионам: регионы в точке и регионы в радиусе.
Центроиды и точка запроса лежат на сфере радиуса EARTH_RADIUS_KM.
"""

from __future__ import annotations

from typing import Optional

from georegions.common.constants import EARTH_RADIUS_KM, TypeMsg
from georegions.common.exceptions import MissingParameterError, NotFoundError
from georegions.common.logger import log_info
from georegions.core.geo.utils import central_angle, distance_to_radians
from georegions.core.regions.models import Region, RegionWithUser
from georegions.core.regions.repository import RegionRepository
from georegions.shared.models.location import Coordinates


NO_REGIONS_MESSAGE = "No regions found at the specified point"


class GeoQueryService:
    """Сервис геозапросов по регионам."""

    def __init__(
        self,
        repository: RegionRepository,
        earth_radius_km: float = EARTH_RADIUS_KM,
    ) -> None:
        self._repo = repository
        self._earth_radius_km = earth_radius_km

    async def regions_containing_point(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> list[Region]:
        """
        Регионы, центроид которых совпадает с точкой.
        Пустой результат не ошибка: возвращается [] и пишется предупреждение.

        Raises:
            MissingParameterError: Не передана широта или долгота
        """
        if latitude is None or longitude is None:
            raise MissingParameterError("Latitude and longitude are required parameters")

        regions = await self._repo.find_at_point(Coordinates(latitude=latitude, longitude=longitude))
        if not regions:
            await log_info(NO_REGIONS_MESSAGE, type_msg=TypeMsg.WARNING)
        return regions

    async def regions_within_distance(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        distance: Optional[float],
    ) -> list[RegionWithUser]:
        """
        Регионы, центроид которых не дальше distance км от точки
        (по дуге большого круга), ближайшие первыми. Владелец подставляется объектом.

        Raises:
            MissingParameterError: Не передан один из параметров
            NotFoundError: Ни один регион не попал в радиус
        """
        if latitude is None or longitude is None or distance is None:
            raise MissingParameterError("Latitude, longitude, and distance are required parameters")

        center = Coordinates(latitude=latitude, longitude=longitude)
        radius = distance_to_radians(distance, self._earth_radius_km)
        regions = await self._repo.find_within_radius(center, radius)
        if not regions:
            raise NotFoundError(NO_REGIONS_MESSAGE)

        # Ближайшие первыми; sorted устойчив, при равенстве остаётся порядок создания
        regions = sorted(regions, key=lambda region: central_angle(center, region.coordinates))

        await log_info(
            f"Найдено регионов в радиусе {distance} км: {len(regions)}",
            type_msg=TypeMsg.DEBUG,
        )
        return regions
