# georegions/services/api/dependencies.py
"""
Зависимости API.
Ресурсы процесса создаются в lifespan, сервисы собираются на каждый запрос
через Depends (в тестах подменяются через app.dependency_overrides).
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends

from georegions.common.constants import TypeMsg
from georegions.common.logger import log_info
from georegions.config import settings
from georegions.core.geo.service import GeoResolver
from georegions.core.regions.queries import GeoQueryService
from georegions.core.regions.repository import RegionRepository
from georegions.core.regions.service import RegionService
from georegions.core.users.repository import UserRepository
from georegions.core.users.service import UserService
from georegions.infra.database import DatabaseManager, close_db, get_db, init_db


# Геокодер процесса (None если геокодирование выключено)
_resolver: Optional[GeoResolver] = None


async def init_dependencies() -> None:
    """Подключение к БД и создание геокодера."""
    global _resolver

    await init_db()

    if settings.geocoding.GEOCODING_ENABLED:
        _resolver = GeoResolver()
        await log_info("Геокодер подключён", type_msg=TypeMsg.DEBUG)


async def close_dependencies() -> None:
    """Закрытие всех ресурсов."""
    global _resolver

    if _resolver is not None:
        await _resolver.close()
        _resolver = None
        await log_info("Геокодер отключён", type_msg=TypeMsg.DEBUG)

    await close_db()


def get_database() -> DatabaseManager:
    return get_db()


def get_resolver() -> Optional[GeoResolver]:
    return _resolver


def get_user_repository(db: DatabaseManager = Depends(get_database)) -> UserRepository:
    return UserRepository(db)


def get_region_repository(db: DatabaseManager = Depends(get_database)) -> RegionRepository:
    return RegionRepository(db)


def get_user_service(
    repository: UserRepository = Depends(get_user_repository),
    resolver: Optional[GeoResolver] = Depends(get_resolver),
) -> UserService:
    return UserService(repository, resolver)


def get_region_service(
    db: DatabaseManager = Depends(get_database),
    region_repository: RegionRepository = Depends(get_region_repository),
    user_repository: UserRepository = Depends(get_user_repository),
) -> RegionService:
    return RegionService(db, region_repository, user_repository)


def get_geo_query_service(
    repository: RegionRepository = Depends(get_region_repository),
) -> GeoQueryService:
    return GeoQueryService(repository, earth_radius_km=settings.geo.EARTH_RADIUS_KM)
