# georegions/services/api/routes.py
"""
Маршруты REST API: пользователи и регионы.
Ошибки домена переводятся в HTTP-ответы обработчиками в app.py.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from georegions.core.regions.models import (
    Region,
    RegionCreateDTO,
    RegionUpdateDTO,
    RegionWithUser,
)
from georegions.core.regions.queries import GeoQueryService
from georegions.core.regions.service import RegionService
from georegions.core.users.models import User, UserCreateDTO, UserUpdateDTO
from georegions.core.users.service import UserService
from georegions.services.api.dependencies import (
    get_geo_query_service,
    get_region_service,
    get_user_service,
)
from georegions.shared.models.common import ErrorResponse, PageResponse


NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Не найдено"}}


# =============================================================================
# USERS API
# =============================================================================

users_router = APIRouter(prefix="/users", tags=["Users"])


@users_router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Нужен ровно один из address/coordinates"},
    },
)
async def create_user(
    request: UserCreateDTO,
    service: UserService = Depends(get_user_service),
) -> User:
    """Создание пользователя."""
    return await service.create_user(request)


@users_router.get("", response_model=PageResponse[User])
async def list_users(
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    service: UserService = Depends(get_user_service),
) -> PageResponse[User]:
    """Список пользователей."""
    return await service.list_users(page, limit)


@users_router.get("/{user_id}", response_model=User, responses=NOT_FOUND_RESPONSE)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> User:
    """Получение пользователя."""
    return await service.get_user(user_id)


@users_router.put("/{user_id}", response_model=User, responses=NOT_FOUND_RESPONSE)
async def update_user(
    user_id: str,
    request: UserUpdateDTO,
    service: UserService = Depends(get_user_service),
) -> User:
    """Частичное обновление пользователя."""
    return await service.update_user(user_id, request)


@users_router.delete("/{user_id}", response_model=User, responses=NOT_FOUND_RESPONSE)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> User:
    """Удаление пользователя вместе с его регионами."""
    return await service.delete_user(user_id)


# =============================================================================
# REGIONS API
# =============================================================================

regions_router = APIRouter(prefix="/regions", tags=["Regions"])


@regions_router.post(
    "",
    response_model=Region,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Регион уже существует"},
    },
)
async def create_region(
    request: RegionCreateDTO,
    service: RegionService = Depends(get_region_service),
) -> Region:
    """Создание региона."""
    return await service.create_region(request)


@regions_router.get("", response_model=PageResponse[Region])
async def list_regions(
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    service: RegionService = Depends(get_region_service),
) -> PageResponse[Region]:
    """Список регионов."""
    return await service.list_regions(page, limit)


# Геозапросы объявлены до /{region_id}, иначе путь перехватит get_region
@regions_router.get("/containing", response_model=list[Region])
async def regions_containing_point(
    latitude: Optional[float] = Query(None, ge=-90.0, le=90.0),
    longitude: Optional[float] = Query(None, ge=-180.0, le=180.0),
    service: GeoQueryService = Depends(get_geo_query_service),
) -> list[Region]:
    """Регионы с центроидом в точке."""
    return await service.regions_containing_point(latitude, longitude)


@regions_router.get(
    "/within-distance",
    response_model=list[RegionWithUser],
    responses=NOT_FOUND_RESPONSE,
)
async def regions_within_distance(
    latitude: Optional[float] = Query(None, ge=-90.0, le=90.0),
    longitude: Optional[float] = Query(None, ge=-180.0, le=180.0),
    distance: Optional[float] = Query(None, ge=0.0, description="Расстояние в км"),
    service: GeoQueryService = Depends(get_geo_query_service),
) -> list[RegionWithUser]:
    """Регионы в радиусе distance км от точки."""
    return await service.regions_within_distance(latitude, longitude, distance)


@regions_router.get("/{region_id}", response_model=Region, responses=NOT_FOUND_RESPONSE)
async def get_region(
    region_id: str,
    service: RegionService = Depends(get_region_service),
) -> Region:
    """Получение региона."""
    return await service.get_region(region_id)


@regions_router.put("/{region_id}", response_model=Region, responses=NOT_FOUND_RESPONSE)
async def update_region(
    region_id: str,
    request: RegionUpdateDTO,
    service: RegionService = Depends(get_region_service),
) -> Region:
    """Частичное обновление региона."""
    return await service.update_region(region_id, request)


@regions_router.delete("/{region_id}", response_model=Region, responses=NOT_FOUND_RESPONSE)
async def delete_region(
    region_id: str,
    service: RegionService = Depends(get_region_service),
) -> Region:
    """Удаление региона."""
    return await service.delete_region(region_id)
