"""Регионы: модели, репозиторий, сервис целостности и геозапросы."""

from georegions.core.regions.models import Region, RegionWithUser, RegionCreateDTO, RegionUpdateDTO
from georegions.core.regions.repository import RegionRepository, row_to_region
from georegions.core.regions.service import RegionService
from georegions.core.regions.queries import GeoQueryService

__all__ = [
    "Region",
    "RegionWithUser",
    "RegionCreateDTO",
    "RegionUpdateDTO",
    "RegionRepository",
    "row_to_region",
    "RegionService",
    "GeoQueryService",
]
